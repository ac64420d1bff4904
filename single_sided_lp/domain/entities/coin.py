from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Coin:
    denom: str
    amount: int
