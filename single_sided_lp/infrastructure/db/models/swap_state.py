from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from single_sided_lp.infrastructure.db.engine import Base


class PendingSwapStateModel(Base):
    __tablename__ = "pending_swap_states"

    correlation_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    pool_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    original_sender: Mapped[str] = mapped_column(Text, nullable=False)
    lower_tick: Mapped[int] = mapped_column(BigInteger, nullable=False)
    upper_tick: Mapped[int] = mapped_column(BigInteger, nullable=False)
    token_min_amount0: Mapped[str] = mapped_column(Text, nullable=False)
    token_min_amount1: Mapped[str] = mapped_column(Text, nullable=False)
    remaining_denom: Mapped[str] = mapped_column(Text, nullable=False)
    remaining_amount: Mapped[str] = mapped_column(Text, nullable=False)
    token_out_denom: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())


class SwapCorrelationIdModel(Base):
    __tablename__ = "swap_correlation_ids"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    issued_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())


class TickExpCacheModel(Base):
    __tablename__ = "tick_exp_cache"

    exponent_index: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    initial_price: Mapped[str] = mapped_column(Text, nullable=False)
    max_price: Mapped[str] = mapped_column(Text, nullable=False)
    additive_increment_per_tick: Mapped[str] = mapped_column(Text, nullable=False)
    initial_tick: Mapped[int] = mapped_column(BigInteger, nullable=False)
