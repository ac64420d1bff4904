from __future__ import annotations

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    pass


@lru_cache(maxsize=4)
def get_engine(dsn: str):
    if dsn.startswith("sqlite") and (dsn == "sqlite://" or ":memory:" in dsn):
        return create_engine(
            dsn,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(dsn, future=True, pool_pre_ping=True)


def create_schema(engine) -> None:
    # Importa os modelos para registrar as tabelas no metadata.
    from single_sided_lp.infrastructure.db.models import swap_state  # noqa: F401

    Base.metadata.create_all(engine)
