from __future__ import annotations

import logging
from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal

from single_sided_lp.domain.entities.pool import PoolSnapshot
from single_sided_lp.domain.entities.swap_plan import AssetRatio, SwapPlan
from single_sided_lp.domain.exceptions import (
    DenomNotInPoolError,
    DivideByZeroError,
    FixedPointUnderflowError,
    InsufficientFundsForSwapError,
)
from single_sided_lp.domain.services.asset_ratio import calc_asset_ratio_from_ticks
from single_sided_lp.domain.services.fixed_point import (
    ONE,
    ZERO,
    checked_add,
    checked_div,
    checked_mul,
    checked_sub,
    checked_uint_sub,
    exact_context,
    round_to_uint,
    to_uint_floor,
)
from single_sided_lp.domain.services.tick_math import TickExpCachePort, price_to_tick


logger = logging.getLogger(__name__)


DEFAULT_CONVERGENCE_THRESHOLD = Decimal("0.000001")


def amount0_delta(
    liquidity: Decimal,
    sqrt_price_a: Decimal,
    sqrt_price_b: Decimal,
    round_up: bool,
) -> int:
    """L * (hi - lo) / (hi * lo), com o maior sqrt price primeiro."""
    high, low = (sqrt_price_a, sqrt_price_b) if sqrt_price_a >= sqrt_price_b else (sqrt_price_b, sqrt_price_a)
    if low == 0:
        raise DivideByZeroError("amount0_delta requires positive sqrt prices.")
    with exact_context():
        value = liquidity * (high - low) / (high * low)
    return round_to_uint(value, round_up=round_up)


def amount1_delta(
    liquidity: Decimal,
    sqrt_price_a: Decimal,
    sqrt_price_b: Decimal,
    round_up: bool,
) -> int:
    with exact_context():
        value = liquidity * abs(sqrt_price_a - sqrt_price_b)
    return round_to_uint(value, round_up=round_up)


def next_sqrt_price_from_amount0_in(
    *,
    liquidity: Decimal,
    sqrt_price: Decimal,
    amount_in: int,
) -> Decimal:
    # Preco cai; arredonda para cima para favorecer a pool.
    if liquidity == 0:
        raise DivideByZeroError("Pool has no in-range liquidity.")
    numerator = checked_mul(liquidity, sqrt_price, rounding=ROUND_CEILING)
    denominator = checked_add(liquidity, checked_mul(Decimal(amount_in), sqrt_price))
    return checked_div(numerator, denominator, rounding=ROUND_CEILING)


def next_sqrt_price_from_amount1_in(
    *,
    liquidity: Decimal,
    sqrt_price: Decimal,
    amount_in: int,
) -> Decimal:
    # Preco sobe; arredonda para baixo para favorecer a pool.
    if liquidity == 0:
        raise DivideByZeroError("Pool has no in-range liquidity.")
    return checked_add(
        sqrt_price,
        checked_div(Decimal(amount_in), liquidity, rounding=ROUND_FLOOR),
    )


def sqrt_price_after_swap(*, pool: PoolSnapshot, token0_in: bool, amount_in: int) -> Decimal:
    if token0_in:
        return next_sqrt_price_from_amount0_in(
            liquidity=pool.current_tick_liquidity,
            sqrt_price=pool.current_sqrt_price,
            amount_in=amount_in,
        )
    return next_sqrt_price_from_amount1_in(
        liquidity=pool.current_tick_liquidity,
        sqrt_price=pool.current_sqrt_price,
        amount_in=amount_in,
    )


def estimate_amount_out(
    *,
    pool: PoolSnapshot,
    token0_in: bool,
    sqrt_price_after: Decimal,
) -> int:
    """Parte do usuario no swap, sempre arredondada para baixo."""
    if token0_in:
        return amount1_delta(pool.current_tick_liquidity, pool.current_sqrt_price, sqrt_price_after, False)
    return amount0_delta(pool.current_tick_liquidity, pool.current_sqrt_price, sqrt_price_after, False)


def swap_ratio_for(
    ratio: AssetRatio,
    *,
    token0_in: bool,
    spread_factor: Decimal | None = None,
) -> Decimal:
    counter_ratio = ratio.ratio1 if token0_in else ratio.ratio0
    if spread_factor is None or counter_ratio == 0:
        return counter_ratio
    return min(ONE, checked_add(counter_ratio, spread_factor))


def minimum_amount_out(
    *,
    estimated_amount_out: int,
    spread_factor: Decimal,
    max_slippage: Decimal,
) -> int:
    if estimated_amount_out <= 0:
        return 0
    after_spread = checked_mul(Decimal(estimated_amount_out), checked_sub(ONE, spread_factor))
    after_slippage = checked_mul(after_spread, checked_sub(ONE, max_slippage))
    return max(1, to_uint_floor(after_slippage))


def calc_swap_amount(
    *,
    pool: PoolSnapshot,
    token_in_denom: str,
    amount_in: int,
    lower_tick: int,
    upper_tick: int,
    include_spread_factor: bool = False,
    max_passes: int = 1,
    convergence_threshold: Decimal = DEFAULT_CONVERGENCE_THRESHOLD,
    max_slippage: Decimal = ZERO,
    tick_cache: TickExpCachePort | None = None,
) -> SwapPlan:
    """Quanto do ativo fornecido trocar para entrar na faixa com o restante.

    A quantidade trocada move o preco, que muda a proporcao alvo. Em vez de
    iterar ate convergir, recalcula a proporcao no tick pos-swap ``max_passes``
    vezes (uma por padrao) e para antes se a proporcao andar menos que
    ``convergence_threshold``.
    """
    if not pool.has_denom(token_in_denom):
        raise DenomNotInPoolError(token_in_denom, pool.pool_id)

    token0_in = token_in_denom == pool.denom0
    spread = pool.spread_factor if include_spread_factor else None
    provided = Decimal(amount_in)

    ratio = calc_asset_ratio_from_ticks(
        lower_tick=lower_tick,
        upper_tick=upper_tick,
        current_tick=pool.current_tick,
    )
    swap_ratio = swap_ratio_for(ratio, token0_in=token0_in, spread_factor=spread)
    swap_amount = to_uint_floor(checked_mul(provided, swap_ratio))
    tick_after = pool.current_tick

    passes = 0
    for _ in range(max(0, max_passes)):
        if swap_amount == 0:
            break
        passes += 1
        sqrt_after = sqrt_price_after_swap(pool=pool, token0_in=token0_in, amount_in=swap_amount)
        tick_after = price_to_tick(checked_mul(sqrt_after, sqrt_after), cache=tick_cache)

        refined_ratio = calc_asset_ratio_from_ticks(
            lower_tick=lower_tick,
            upper_tick=upper_tick,
            current_tick=tick_after,
        )
        refined_swap_ratio = swap_ratio_for(refined_ratio, token0_in=token0_in, spread_factor=spread)
        moved = abs(refined_swap_ratio - swap_ratio)

        ratio = refined_ratio
        swap_ratio = refined_swap_ratio
        swap_amount = to_uint_floor(checked_mul(provided, swap_ratio))
        if moved < convergence_threshold:
            break

    try:
        remaining_amount = checked_uint_sub(amount_in, swap_amount)
    except FixedPointUnderflowError as exc:
        raise InsufficientFundsForSwapError(balance=amount_in, needed=swap_amount) from exc

    if swap_amount > 0:
        sqrt_after = sqrt_price_after_swap(pool=pool, token0_in=token0_in, amount_in=swap_amount)
        estimated_out = estimate_amount_out(pool=pool, token0_in=token0_in, sqrt_price_after=sqrt_after)
    else:
        sqrt_after = pool.current_sqrt_price
        estimated_out = 0

    token_out_min_amount = minimum_amount_out(
        estimated_amount_out=estimated_out,
        spread_factor=pool.spread_factor,
        max_slippage=max_slippage,
    )

    logger.debug(
        "swap_amount: plan pool=%s token_in=%s amount_in=%s swap_amount=%s remaining=%s ratio0=%s tick_before=%s tick_after=%s passes=%s",
        pool.pool_id,
        token_in_denom,
        amount_in,
        swap_amount,
        remaining_amount,
        ratio.ratio0,
        pool.current_tick,
        tick_after,
        passes,
    )

    return SwapPlan(
        token_in_denom=token_in_denom,
        token_out_denom=pool.counter_denom(token_in_denom),
        amount_provided=amount_in,
        swap_amount=swap_amount,
        remaining_amount=remaining_amount,
        ratio=ratio,
        sqrt_price_after=sqrt_after,
        tick_after=tick_after,
        estimated_amount_out=estimated_out,
        token_out_min_amount=token_out_min_amount,
        passes=passes,
    )
