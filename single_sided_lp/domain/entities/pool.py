from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PoolSnapshot:
    pool_id: int
    denom0: str
    denom1: str
    current_tick: int
    current_sqrt_price: Decimal
    current_tick_liquidity: Decimal
    spread_factor: Decimal

    def has_denom(self, denom: str) -> bool:
        return denom in (self.denom0, self.denom1)

    def counter_denom(self, denom: str) -> str:
        return self.denom1 if denom == self.denom0 else self.denom0
