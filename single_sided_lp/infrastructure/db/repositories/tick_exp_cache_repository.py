from __future__ import annotations

import logging

from sqlalchemy import text

from single_sided_lp.domain.entities.tick_exp_index import TickExpIndexData
from single_sided_lp.domain.services.fixed_point import format_decimal
from single_sided_lp.domain.services.tick_math import TickExpCachePort
from single_sided_lp.infrastructure.db.mappers.swap_state_mapper import map_row_to_tick_exp_index


logger = logging.getLogger(__name__)


class SqlTickExpCacheRepository(TickExpCachePort):
    """Buckets de expoente persistidos; a grade de ticks e estatica, entao nunca invalida."""

    def __init__(self, engine):
        self._engine = engine

    def get(self, *, exponent_index: int) -> TickExpIndexData | None:
        sql = text(
            """
            SELECT initial_price, max_price, additive_increment_per_tick, initial_tick
            FROM tick_exp_cache
            WHERE exponent_index = :exponent_index
            LIMIT 1
            """
        )
        with self._engine.connect() as conn:
            row = conn.execute(sql, {"exponent_index": exponent_index}).mappings().first()
        if row is None:
            return None
        return map_row_to_tick_exp_index(row)

    def save(self, *, exponent_index: int, data: TickExpIndexData) -> None:
        sql = text(
            """
            INSERT INTO tick_exp_cache (
                exponent_index,
                initial_price,
                max_price,
                additive_increment_per_tick,
                initial_tick
            )
            VALUES (
                :exponent_index,
                :initial_price,
                :max_price,
                :additive_increment_per_tick,
                :initial_tick
            )
            ON CONFLICT (exponent_index) DO NOTHING
            """
        )
        with self._engine.begin() as conn:
            conn.execute(
                sql,
                {
                    "exponent_index": exponent_index,
                    "initial_price": format_decimal(data.initial_price),
                    "max_price": format_decimal(data.max_price),
                    "additive_increment_per_tick": format_decimal(data.additive_increment_per_tick),
                    "initial_tick": data.initial_tick,
                },
            )
        logger.debug("tick_exp_cache_repo: save exponent_index=%s", exponent_index)
