from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class TickExpIndexData:
    initial_price: Decimal
    max_price: Decimal
    additive_increment_per_tick: Decimal
    initial_tick: int
