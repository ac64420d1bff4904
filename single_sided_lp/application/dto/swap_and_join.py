from __future__ import annotations

from dataclasses import dataclass

from single_sided_lp.domain.entities.coin import Coin
from single_sided_lp.domain.entities.instructions import (
    CreatePositionInstruction,
    DelegatedExecution,
)
from single_sided_lp.domain.entities.swap_plan import SwapPlan


STATUS_AWAITING_CONFIRMATION = "awaiting_confirmation"
STATUS_POSITION_OPENED = "position_opened"


@dataclass(frozen=True)
class SwapAndJoinInput:
    sender: str
    pool_id: int
    lower_tick: int
    upper_tick: int
    token_provided: Coin
    token_min_amount0: int
    token_min_amount1: int


@dataclass(frozen=True)
class SwapAndJoinOutput:
    status: str
    correlation_id: int | None
    plan: SwapPlan
    execution: DelegatedExecution


@dataclass(frozen=True)
class QuoteSwapAndJoinOutput:
    pool_id: int
    current_tick: int
    plan: SwapPlan


@dataclass(frozen=True)
class ConfirmSwapInput:
    correlation_id: int
    success: bool
    payload: bytes | None = None
    error: str | None = None


@dataclass(frozen=True)
class ConfirmSwapOutput:
    status: str
    correlation_id: int
    create_position: CreatePositionInstruction
    execution: DelegatedExecution


@dataclass(frozen=True)
class CreatePositionInput:
    sender: str
    pool_id: int
    lower_tick: int
    upper_tick: int
    tokens_provided: tuple[Coin, ...]
    token_min_amount0: int
    token_min_amount1: int


@dataclass(frozen=True)
class CreatePositionOutput:
    status: str
    create_position: CreatePositionInstruction
    execution: DelegatedExecution
