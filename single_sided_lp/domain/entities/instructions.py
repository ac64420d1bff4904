from __future__ import annotations

from dataclasses import dataclass

from single_sided_lp.domain.entities.coin import Coin


MSG_SWAP_EXACT_AMOUNT_IN = "/osmosis.poolmanager.v1beta1.MsgSwapExactAmountIn"
MSG_CREATE_POSITION = "/osmosis.concentratedliquidity.v1beta1.MsgCreatePosition"
MSG_EXEC = "/cosmos.authz.v1beta1.MsgExec"


@dataclass(frozen=True)
class SwapAmountInRoute:
    pool_id: int
    token_out_denom: str


@dataclass(frozen=True)
class SwapInstruction:
    sender: str
    routes: tuple[SwapAmountInRoute, ...]
    token_in: Coin
    token_out_min_amount: int

    type_url = MSG_SWAP_EXACT_AMOUNT_IN


@dataclass(frozen=True)
class CreatePositionInstruction:
    pool_id: int
    sender: str
    lower_tick: int
    upper_tick: int
    tokens_provided: tuple[Coin, ...]
    token_min_amount0: int
    token_min_amount1: int

    type_url = MSG_CREATE_POSITION


@dataclass(frozen=True)
class DelegatedExecution:
    grantee: str
    msgs: tuple[SwapInstruction | CreatePositionInstruction, ...]

    type_url = MSG_EXEC


@dataclass(frozen=True)
class SwapConfirmation:
    correlation_id: int
    success: bool
    payload: bytes | None = None
    error: str | None = None
