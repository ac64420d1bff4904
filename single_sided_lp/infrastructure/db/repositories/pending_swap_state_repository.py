from __future__ import annotations

import logging

from sqlalchemy import text

from single_sided_lp.application.ports.pending_swap_state_port import (
    CorrelationIdPort,
    PendingSwapStatePort,
)
from single_sided_lp.domain.entities.pending_swap import PendingSwapState
from single_sided_lp.infrastructure.db.mappers.swap_state_mapper import (
    map_pending_swap_state_to_params,
    map_row_to_pending_swap_state,
)


logger = logging.getLogger(__name__)


class SqlPendingSwapStateRepository(PendingSwapStatePort, CorrelationIdPort):
    def __init__(self, engine):
        self._engine = engine

    def next_correlation_id(self) -> int:
        insert_sql = text("INSERT INTO swap_correlation_ids DEFAULT VALUES RETURNING id")
        # Mantem so a linha mais recente; ela segura o proximo valor da sequencia.
        prune_sql = text("DELETE FROM swap_correlation_ids WHERE id < :id")
        with self._engine.begin() as conn:
            correlation_id = int(conn.execute(insert_sql).scalar_one())
            conn.execute(prune_sql, {"id": correlation_id})
        logger.debug("pending_swap_state_repo: next_correlation_id id=%s", correlation_id)
        return correlation_id

    def save(self, *, state: PendingSwapState) -> None:
        sql = text(
            """
            INSERT INTO pending_swap_states (
                correlation_id,
                pool_id,
                original_sender,
                lower_tick,
                upper_tick,
                token_min_amount0,
                token_min_amount1,
                remaining_denom,
                remaining_amount,
                token_out_denom
            )
            VALUES (
                :correlation_id,
                :pool_id,
                :original_sender,
                :lower_tick,
                :upper_tick,
                :token_min_amount0,
                :token_min_amount1,
                :remaining_denom,
                :remaining_amount,
                :token_out_denom
            )
            ON CONFLICT (correlation_id)
            DO UPDATE SET
                pool_id = EXCLUDED.pool_id,
                original_sender = EXCLUDED.original_sender,
                lower_tick = EXCLUDED.lower_tick,
                upper_tick = EXCLUDED.upper_tick,
                token_min_amount0 = EXCLUDED.token_min_amount0,
                token_min_amount1 = EXCLUDED.token_min_amount1,
                remaining_denom = EXCLUDED.remaining_denom,
                remaining_amount = EXCLUDED.remaining_amount,
                token_out_denom = EXCLUDED.token_out_denom
            """
        )
        with self._engine.begin() as conn:
            conn.execute(sql, map_pending_swap_state_to_params(state))
        logger.debug(
            "pending_swap_state_repo: save correlation_id=%s pool=%s sender=%s",
            state.correlation_id,
            state.pool_id,
            state.original_sender,
        )

    def get(self, *, correlation_id: int) -> PendingSwapState | None:
        sql = text(
            """
            SELECT
                correlation_id,
                pool_id,
                original_sender,
                lower_tick,
                upper_tick,
                token_min_amount0,
                token_min_amount1,
                remaining_denom,
                remaining_amount,
                token_out_denom
            FROM pending_swap_states
            WHERE correlation_id = :correlation_id
            LIMIT 1
            """
        )
        with self._engine.connect() as conn:
            row = conn.execute(sql, {"correlation_id": correlation_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_pending_swap_state(row)

    def take(self, *, correlation_id: int) -> PendingSwapState | None:
        sql = text(
            """
            DELETE FROM pending_swap_states
            WHERE correlation_id = :correlation_id
            RETURNING
                correlation_id,
                pool_id,
                original_sender,
                lower_tick,
                upper_tick,
                token_min_amount0,
                token_min_amount1,
                remaining_denom,
                remaining_amount,
                token_out_denom
            """
        )
        with self._engine.begin() as conn:
            row = conn.execute(sql, {"correlation_id": correlation_id}).mappings().first()
        logger.debug(
            "pending_swap_state_repo: take correlation_id=%s found=%s",
            correlation_id,
            row is not None,
        )
        if row is None:
            return None
        return map_row_to_pending_swap_state(row)
