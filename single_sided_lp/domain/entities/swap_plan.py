from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class AssetRatio:
    ratio0: Decimal
    ratio1: Decimal


@dataclass(frozen=True)
class SwapPlan:
    token_in_denom: str
    token_out_denom: str
    amount_provided: int
    swap_amount: int
    remaining_amount: int
    ratio: AssetRatio
    sqrt_price_after: Decimal
    tick_after: int
    estimated_amount_out: int
    token_out_min_amount: int
    passes: int
