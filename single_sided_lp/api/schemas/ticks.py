from __future__ import annotations

from pydantic import BaseModel


class TickPriceResponse(BaseModel):
    tick: int
    price: str
    sqrt_price: str


class PriceTickResponse(BaseModel):
    price: str
    tick: int
