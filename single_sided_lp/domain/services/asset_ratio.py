from __future__ import annotations

from decimal import Decimal

from single_sided_lp.domain.entities.swap_plan import AssetRatio
from single_sided_lp.domain.exceptions import InvalidTickRangeError
from single_sided_lp.domain.services.fixed_point import (
    ONE,
    ZERO,
    checked_add,
    checked_div,
    checked_mul,
    checked_sub,
)
from single_sided_lp.domain.services.tick_math import tick_to_sqrt_price


ALL_TOKEN0 = AssetRatio(ratio0=ONE, ratio1=ZERO)
ALL_TOKEN1 = AssetRatio(ratio0=ZERO, ratio1=ONE)


def calc_asset_ratio(
    *,
    sqrt_price_lower: Decimal,
    sqrt_price_upper: Decimal,
    sqrt_price_current: Decimal,
) -> AssetRatio:
    """Proporcao token0:token1 de uma unidade de liquidez com preco atual dentro da faixa."""
    delta_x = checked_div(
        checked_sub(sqrt_price_upper, sqrt_price_current),
        checked_mul(sqrt_price_upper, sqrt_price_current),
    )
    delta_y = checked_sub(sqrt_price_current, sqrt_price_lower)
    ratio0 = checked_div(delta_x, checked_add(delta_x, delta_y))
    return AssetRatio(ratio0=ratio0, ratio1=checked_sub(ONE, ratio0))


def calc_asset_ratio_from_ticks(
    *,
    lower_tick: int,
    upper_tick: int,
    current_tick: int,
) -> AssetRatio:
    if lower_tick > upper_tick:
        raise InvalidTickRangeError(
            f"lower_tick ({lower_tick}) must not be greater than upper_tick ({upper_tick})."
        )
    if upper_tick < current_tick:
        return ALL_TOKEN1
    if lower_tick > current_tick:
        return ALL_TOKEN0

    return calc_asset_ratio(
        sqrt_price_lower=tick_to_sqrt_price(lower_tick),
        sqrt_price_upper=tick_to_sqrt_price(upper_tick),
        sqrt_price_current=tick_to_sqrt_price(current_tick),
    )
