from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from single_sided_lp.domain.entities.coin import Coin
from single_sided_lp.domain.entities.pending_swap import PendingSwapState
from single_sided_lp.domain.entities.tick_exp_index import TickExpIndexData


def map_row_to_pending_swap_state(row: Mapping[str, Any]) -> PendingSwapState:
    return PendingSwapState(
        correlation_id=int(row["correlation_id"]),
        pool_id=int(row["pool_id"]),
        original_sender=str(row["original_sender"]),
        lower_tick=int(row["lower_tick"]),
        upper_tick=int(row["upper_tick"]),
        token_min_amount0=int(row["token_min_amount0"]),
        token_min_amount1=int(row["token_min_amount1"]),
        token_provided_remaining=Coin(
            denom=str(row["remaining_denom"]),
            amount=int(row["remaining_amount"]),
        ),
        token_out_denom=str(row["token_out_denom"]),
    )


def map_pending_swap_state_to_params(state: PendingSwapState) -> dict[str, Any]:
    # u128 nao cabe em BIGINT; valores vao como texto decimal.
    return {
        "correlation_id": state.correlation_id,
        "pool_id": state.pool_id,
        "original_sender": state.original_sender,
        "lower_tick": state.lower_tick,
        "upper_tick": state.upper_tick,
        "token_min_amount0": str(state.token_min_amount0),
        "token_min_amount1": str(state.token_min_amount1),
        "remaining_denom": state.token_provided_remaining.denom,
        "remaining_amount": str(state.token_provided_remaining.amount),
        "token_out_denom": state.token_out_denom,
    }


def map_row_to_tick_exp_index(row: Mapping[str, Any]) -> TickExpIndexData:
    return TickExpIndexData(
        initial_price=Decimal(str(row["initial_price"])),
        max_price=Decimal(str(row["max_price"])),
        additive_increment_per_tick=Decimal(str(row["additive_increment_per_tick"])),
        initial_tick=int(row["initial_tick"]),
    )
