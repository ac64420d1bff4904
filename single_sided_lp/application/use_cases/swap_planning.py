from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from single_sided_lp.application.dto.swap_and_join import SwapAndJoinInput
from single_sided_lp.application.ports.pool_registry_port import PoolRegistryPort
from single_sided_lp.domain.entities.pool import PoolSnapshot
from single_sided_lp.domain.entities.swap_plan import SwapPlan
from single_sided_lp.domain.exceptions import (
    DenomNotInPoolError,
    InvalidTickRangeError,
    PoolNotFoundError,
    ValidationError,
)
from single_sided_lp.domain.services.swap_amount import (
    DEFAULT_CONVERGENCE_THRESHOLD,
    calc_swap_amount,
)
from single_sided_lp.domain.services.tick_math import TickExpCachePort, validate_tick


@dataclass(frozen=True)
class SwapPlanningSettings:
    include_spread_factor: bool = False
    max_passes: int = 1
    convergence_threshold: Decimal = DEFAULT_CONVERGENCE_THRESHOLD
    max_slippage: Decimal = Decimal("0.01")


def validate_tick_range(lower_tick: int, upper_tick: int) -> None:
    validate_tick(lower_tick)
    validate_tick(upper_tick)
    if lower_tick >= upper_tick:
        raise InvalidTickRangeError("lower_tick must be lower than upper_tick.")


def validate_command(command: SwapAndJoinInput) -> None:
    validate_tick_range(command.lower_tick, command.upper_tick)
    if command.token_provided.amount <= 0:
        raise ValidationError("token_provided amount must be positive.")


def plan_swap_and_join(
    *,
    command: SwapAndJoinInput,
    pool_port: PoolRegistryPort,
    settings: SwapPlanningSettings,
    tick_cache: TickExpCachePort | None = None,
) -> tuple[PoolSnapshot, SwapPlan]:
    validate_command(command)

    pool = pool_port.get_pool(pool_id=command.pool_id)
    if pool is None:
        raise PoolNotFoundError(f"Pool-id {command.pool_id} not found.")
    if not pool.has_denom(command.token_provided.denom):
        raise DenomNotInPoolError(command.token_provided.denom, pool.pool_id)

    plan = calc_swap_amount(
        pool=pool,
        token_in_denom=command.token_provided.denom,
        amount_in=command.token_provided.amount,
        lower_tick=command.lower_tick,
        upper_tick=command.upper_tick,
        include_spread_factor=settings.include_spread_factor,
        max_passes=settings.max_passes,
        convergence_threshold=settings.convergence_threshold,
        max_slippage=settings.max_slippage,
        tick_cache=tick_cache,
    )
    return pool, plan
