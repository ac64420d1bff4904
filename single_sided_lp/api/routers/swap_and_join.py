from __future__ import annotations

import base64
import binascii

from fastapi import APIRouter, Depends, HTTPException

from single_sided_lp.api.auth import require_api_token
from single_sided_lp.api.deps import (
    get_confirm_swap_use_case,
    get_create_position_use_case,
    get_quote_swap_and_join_use_case,
    get_swap_and_join_use_case,
)
from single_sided_lp.api.schemas.swap_and_join import (
    CoinResponse,
    ConfirmSwapRequest,
    ConfirmSwapResponse,
    CreatePositionRequest,
    CreatePositionResponse,
    DelegatedExecutionResponse,
    MessageResponse,
    QuoteSwapAndJoinResponse,
    SwapAndJoinRequest,
    SwapAndJoinResponse,
    SwapPlanResponse,
)
from single_sided_lp.application.dto.swap_and_join import (
    ConfirmSwapInput,
    CreatePositionInput,
    SwapAndJoinInput,
)
from single_sided_lp.application.use_cases.confirm_swap import ConfirmSwapUseCase
from single_sided_lp.application.use_cases.create_position import CreatePositionUseCase
from single_sided_lp.application.use_cases.quote_swap_and_join import QuoteSwapAndJoinUseCase
from single_sided_lp.application.use_cases.swap_and_join import SwapAndJoinUseCase
from single_sided_lp.domain.entities.coin import Coin
from single_sided_lp.domain.entities.instructions import (
    CreatePositionInstruction,
    DelegatedExecution,
    SwapInstruction,
)
from single_sided_lp.domain.entities.swap_plan import SwapPlan
from single_sided_lp.domain.exceptions import (
    CheckedArithmeticError,
    PoolNotFoundError,
    PoolRegistryError,
    StateError,
    SwapFailedError,
    ValidationError,
)
from single_sided_lp.domain.services.fixed_point import format_decimal

router = APIRouter()


def _coin(coin: Coin) -> dict:
    return {"denom": coin.denom, "amount": str(coin.amount)}


def _message(msg: SwapInstruction | CreatePositionInstruction) -> MessageResponse:
    if isinstance(msg, SwapInstruction):
        value = {
            "sender": msg.sender,
            "routes": [
                {"pool_id": str(route.pool_id), "token_out_denom": route.token_out_denom}
                for route in msg.routes
            ],
            "token_in": _coin(msg.token_in),
            "token_out_min_amount": str(msg.token_out_min_amount),
        }
    else:
        value = {
            "pool_id": str(msg.pool_id),
            "sender": msg.sender,
            "lower_tick": str(msg.lower_tick),
            "upper_tick": str(msg.upper_tick),
            "tokens_provided": [_coin(coin) for coin in msg.tokens_provided],
            "token_min_amount0": str(msg.token_min_amount0),
            "token_min_amount1": str(msg.token_min_amount1),
        }
    return MessageResponse(type_url=msg.type_url, value=value)


def _execution(execution: DelegatedExecution) -> DelegatedExecutionResponse:
    return DelegatedExecutionResponse(
        type_url=execution.type_url,
        grantee=execution.grantee,
        msgs=[_message(msg) for msg in execution.msgs],
    )


def _plan(plan: SwapPlan) -> SwapPlanResponse:
    return SwapPlanResponse(
        token_in_denom=plan.token_in_denom,
        token_out_denom=plan.token_out_denom,
        amount_provided=str(plan.amount_provided),
        swap_amount=str(plan.swap_amount),
        remaining_amount=str(plan.remaining_amount),
        ratio0=format_decimal(plan.ratio.ratio0),
        ratio1=format_decimal(plan.ratio.ratio1),
        sqrt_price_after=format_decimal(plan.sqrt_price_after),
        tick_after=plan.tick_after,
        estimated_amount_out=str(plan.estimated_amount_out),
        token_out_min_amount=str(plan.token_out_min_amount),
        passes=plan.passes,
    )


def _to_input(req: SwapAndJoinRequest) -> SwapAndJoinInput:
    return SwapAndJoinInput(
        sender=req.sender,
        pool_id=req.pool_id,
        lower_tick=req.lower_tick,
        upper_tick=req.upper_tick,
        token_provided=Coin(denom=req.token_provided.denom, amount=req.token_provided.amount),
        token_min_amount0=req.token_min_amount0,
        token_min_amount1=req.token_min_amount1,
    )


@router.post("/v1/swap-and-join", response_model=SwapAndJoinResponse)
def swap_and_join(
    req: SwapAndJoinRequest,
    _token: str = Depends(require_api_token),
    use_case: SwapAndJoinUseCase = Depends(get_swap_and_join_use_case),
):
    try:
        result = use_case.execute(_to_input(req))
    except PoolNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except CheckedArithmeticError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except PoolRegistryError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return SwapAndJoinResponse(
        status=result.status,
        correlation_id=result.correlation_id,
        plan=_plan(result.plan),
        execution=_execution(result.execution),
    )


@router.post("/v1/swap-and-join/quote", response_model=QuoteSwapAndJoinResponse)
def quote_swap_and_join(
    req: SwapAndJoinRequest,
    _token: str = Depends(require_api_token),
    use_case: QuoteSwapAndJoinUseCase = Depends(get_quote_swap_and_join_use_case),
):
    try:
        result = use_case.execute(_to_input(req))
    except PoolNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except CheckedArithmeticError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except PoolRegistryError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return QuoteSwapAndJoinResponse(
        pool_id=result.pool_id,
        current_tick=result.current_tick,
        plan=_plan(result.plan),
    )


@router.post("/v1/swap-and-join/confirm", response_model=ConfirmSwapResponse)
def confirm_swap(
    req: ConfirmSwapRequest,
    _token: str = Depends(require_api_token),
    use_case: ConfirmSwapUseCase = Depends(get_confirm_swap_use_case),
):
    payload = None
    if req.data is not None:
        try:
            payload = base64.b64decode(req.data, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise HTTPException(status_code=400, detail="data must be base64 encoded.") from exc

    try:
        result = use_case.execute(
            ConfirmSwapInput(
                correlation_id=req.correlation_id,
                success=req.success,
                payload=payload,
                error=req.error,
            )
        )
    except StateError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except SwapFailedError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except CheckedArithmeticError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return ConfirmSwapResponse(
        status=result.status,
        correlation_id=result.correlation_id,
        tokens_provided=[
            CoinResponse(denom=coin.denom, amount=str(coin.amount))
            for coin in result.create_position.tokens_provided
        ],
        execution=_execution(result.execution),
    )


@router.post("/v1/positions", response_model=CreatePositionResponse)
def create_position(
    req: CreatePositionRequest,
    _token: str = Depends(require_api_token),
    use_case: CreatePositionUseCase = Depends(get_create_position_use_case),
):
    try:
        result = use_case.execute(
            CreatePositionInput(
                sender=req.sender,
                pool_id=req.pool_id,
                lower_tick=req.lower_tick,
                upper_tick=req.upper_tick,
                tokens_provided=tuple(Coin(denom=coin.denom, amount=coin.amount) for coin in req.tokens_provided),
                token_min_amount0=req.token_min_amount0,
                token_min_amount1=req.token_min_amount1,
            )
        )
    except PoolNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PoolRegistryError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return CreatePositionResponse(
        status=result.status,
        tokens_provided=[
            CoinResponse(denom=coin.denom, amount=str(coin.amount))
            for coin in result.create_position.tokens_provided
        ],
        execution=_execution(result.execution),
    )
