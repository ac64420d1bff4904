from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from single_sided_lp.domain.services.fixed_point import UINT64_MAX, UINT128_MAX


class CoinRequest(BaseModel):
    denom: str = Field(..., min_length=1, description="Denom do ativo fornecido.")
    amount: int = Field(..., gt=0, le=UINT128_MAX, description="Quantidade inteira (u128).")


class CoinResponse(BaseModel):
    denom: str
    amount: str


class SwapAndJoinRequest(BaseModel):
    sender: str = Field(..., min_length=1, description="Endereco dono da posicao; executa via authz.")
    pool_id: int = Field(..., ge=0, le=UINT64_MAX)
    lower_tick: int
    upper_tick: int
    token_provided: CoinRequest
    token_min_amount0: int = Field(0, ge=0, le=UINT128_MAX)
    token_min_amount1: int = Field(0, ge=0, le=UINT128_MAX)


class MessageResponse(BaseModel):
    type_url: str
    value: dict[str, Any]


class DelegatedExecutionResponse(BaseModel):
    type_url: str
    grantee: str
    msgs: list[MessageResponse]


class SwapPlanResponse(BaseModel):
    token_in_denom: str
    token_out_denom: str
    amount_provided: str
    swap_amount: str
    remaining_amount: str
    ratio0: str
    ratio1: str
    sqrt_price_after: str
    tick_after: int
    estimated_amount_out: str
    token_out_min_amount: str
    passes: int


class SwapAndJoinResponse(BaseModel):
    status: str
    correlation_id: int | None
    plan: SwapPlanResponse
    execution: DelegatedExecutionResponse


class QuoteSwapAndJoinResponse(BaseModel):
    pool_id: int
    current_tick: int
    plan: SwapPlanResponse


class ConfirmSwapRequest(BaseModel):
    correlation_id: int = Field(..., ge=0, le=UINT64_MAX)
    success: bool
    data: str | None = Field(None, description="Resultado bruto do swap em base64.")
    error: str | None = Field(None, description="Motivo reportado pelo host quando success=false.")


class ConfirmSwapResponse(BaseModel):
    status: str
    correlation_id: int
    tokens_provided: list[CoinResponse]
    execution: DelegatedExecutionResponse


class CreatePositionRequest(BaseModel):
    sender: str = Field(..., min_length=1, description="Endereco dono da posicao; executa via authz.")
    pool_id: int = Field(..., ge=0, le=UINT64_MAX)
    lower_tick: int
    upper_tick: int
    tokens_provided: list[CoinRequest] = Field(..., min_length=1, max_length=2)
    token_min_amount0: int = Field(0, ge=0, le=UINT128_MAX)
    token_min_amount1: int = Field(0, ge=0, le=UINT128_MAX)


class CreatePositionResponse(BaseModel):
    status: str
    tokens_provided: list[CoinResponse]
    execution: DelegatedExecutionResponse
