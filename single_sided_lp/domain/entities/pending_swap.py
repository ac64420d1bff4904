from __future__ import annotations

from dataclasses import dataclass

from single_sided_lp.domain.entities.coin import Coin


@dataclass(frozen=True)
class PendingSwapState:
    correlation_id: int
    pool_id: int
    original_sender: str
    lower_tick: int
    upper_tick: int
    token_min_amount0: int
    token_min_amount1: int
    token_provided_remaining: Coin
    token_out_denom: str
