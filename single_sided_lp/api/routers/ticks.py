from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from single_sided_lp.api.deps import get_tick_cache
from single_sided_lp.api.schemas.ticks import PriceTickResponse, TickPriceResponse
from single_sided_lp.domain.exceptions import CheckedArithmeticError, ValidationError
from single_sided_lp.domain.services.fixed_point import format_decimal, parse_decimal
from single_sided_lp.domain.services.tick_math import (
    TickExpCachePort,
    price_to_tick,
    tick_to_price,
    tick_to_sqrt_price,
)

router = APIRouter()


@router.get("/v1/ticks/{tick}/price", response_model=TickPriceResponse)
def get_tick_price(tick: int):
    try:
        price = tick_to_price(tick)
        sqrt_price = tick_to_sqrt_price(tick)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return TickPriceResponse(
        tick=tick,
        price=format_decimal(price),
        sqrt_price=format_decimal(sqrt_price),
    )


@router.get("/v1/prices/{price}/tick", response_model=PriceTickResponse)
def get_price_tick(
    price: str,
    tick_cache: TickExpCachePort = Depends(get_tick_cache),
):
    try:
        parsed = parse_decimal(price, field_name="price")
        tick = price_to_tick(parsed, cache=tick_cache)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except CheckedArithmeticError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return PriceTickResponse(price=format_decimal(parsed), tick=tick)
