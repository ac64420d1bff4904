from __future__ import annotations

from decimal import Decimal
from threading import Lock
from typing import Protocol

from single_sided_lp.domain.entities.tick_exp_index import TickExpIndexData
from single_sided_lp.domain.exceptions import (
    PriceBoundError,
    TickIndexMaxError,
    TickIndexMinError,
)
from single_sided_lp.domain.services.fixed_point import (
    ONE,
    checked_add,
    checked_div,
    checked_mul,
    checked_sqrt,
    checked_sub,
    pow_ten,
    to_uint_floor,
)


EXPONENT_AT_PRICE_ONE = -6
GEOMETRIC_EXPONENT_INCREMENT_DISTANCE_IN_TICKS = 9 * 10 ** (-EXPONENT_AT_PRICE_ONE)
MIN_TICK = -108_000_000
MAX_TICK = 342_000_000
MIN_SPOT_PRICE = Decimal("0.000000000001")
MAX_SPOT_PRICE = Decimal("100000000000000000000000000000000000000")


class TickExpCachePort(Protocol):
    def get(self, *, exponent_index: int) -> TickExpIndexData | None:
        ...

    def save(self, *, exponent_index: int, data: TickExpIndexData) -> None:
        ...


class InMemoryTickExpCache:
    """Cache append-only dos buckets de expoente, vive enquanto o processo vive."""

    def __init__(self):
        self._entries: dict[int, TickExpIndexData] = {}
        self._lock = Lock()

    def get(self, *, exponent_index: int) -> TickExpIndexData | None:
        return self._entries.get(exponent_index)

    def save(self, *, exponent_index: int, data: TickExpIndexData) -> None:
        with self._lock:
            self._entries.setdefault(exponent_index, data)

    def __len__(self) -> int:
        return len(self._entries)


_default_cache = InMemoryTickExpCache()


def default_tick_exp_cache() -> InMemoryTickExpCache:
    return _default_cache


def validate_tick(tick: int) -> int:
    if tick < MIN_TICK:
        raise TickIndexMinError(f"Tick index {tick} is below minimum {MIN_TICK}.")
    if tick > MAX_TICK:
        raise TickIndexMaxError(f"Tick index {tick} is above maximum {MAX_TICK}.")
    return tick


def validate_price(price: Decimal) -> Decimal:
    if price > MAX_SPOT_PRICE or price < MIN_SPOT_PRICE:
        raise PriceBoundError(price)
    return price


def _trunc_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator >= 0) else -quotient


def tick_to_price(tick: int) -> Decimal:
    if tick == 0:
        return ONE
    validate_tick(tick)

    spacing = GEOMETRIC_EXPONENT_INCREMENT_DISTANCE_IN_TICKS
    # Divisao truncada em direcao a zero, como na cadeia; o ramo de offset
    # negativo existe por causa disso.
    geometric_exponent_delta = _trunc_div(tick, spacing)

    exponent_at_current_tick = EXPONENT_AT_PRICE_ONE + geometric_exponent_delta
    if tick < 0:
        # Abaixo de 1 a precisao aumenta um passo a mais.
        exponent_at_current_tick -= 1

    additive_increment = pow_ten(exponent_at_current_tick)
    num_additive_ticks = tick - geometric_exponent_delta * spacing

    base_price = pow_ten(geometric_exponent_delta)
    if num_additive_ticks < 0:
        price = checked_sub(
            base_price,
            checked_mul(Decimal(-num_additive_ticks), additive_increment),
        )
    else:
        price = checked_add(
            base_price,
            checked_mul(Decimal(num_additive_ticks), additive_increment),
        )

    return validate_price(price)


def tick_to_sqrt_price(tick: int) -> Decimal:
    return checked_sqrt(tick_to_price(tick))


def build_tick_exp_index(exponent_index: int) -> TickExpIndexData:
    return TickExpIndexData(
        initial_price=pow_ten(exponent_index),
        max_price=pow_ten(exponent_index + 1),
        additive_increment_per_tick=pow_ten(EXPONENT_AT_PRICE_ONE + exponent_index),
        initial_tick=GEOMETRIC_EXPONENT_INCREMENT_DISTANCE_IN_TICKS * exponent_index,
    )


def load_tick_exp_index(cache: TickExpCachePort, exponent_index: int) -> TickExpIndexData:
    data = cache.get(exponent_index=exponent_index)
    if data is None:
        data = build_tick_exp_index(exponent_index)
        cache.save(exponent_index=exponent_index, data=data)
    return data


def price_to_tick(price: Decimal, *, cache: TickExpCachePort | None = None) -> int:
    """Inverte tick_to_price.

    O tick devolvido e o maior tick cujo preco nao passa de ``price`` dentro do
    bucket de expoente, entao tick_to_price(price_to_tick(p)) fica no maximo um
    incremento aditivo abaixo de p.
    """
    validate_price(price)
    if price == ONE:
        return 0

    cache = cache if cache is not None else _default_cache

    if price > ONE:
        exponent_index = 0
        geo_spacing = load_tick_exp_index(cache, exponent_index)
        while geo_spacing.max_price < price:
            exponent_index += 1
            geo_spacing = load_tick_exp_index(cache, exponent_index)
    else:
        exponent_index = -1
        geo_spacing = load_tick_exp_index(cache, exponent_index)
        while geo_spacing.initial_price > price:
            exponent_index -= 1
            geo_spacing = load_tick_exp_index(cache, exponent_index)

    price_in_this_exponent = checked_sub(price, geo_spacing.initial_price)
    ticks_filled = checked_div(price_in_this_exponent, geo_spacing.additive_increment_per_tick)
    tick = geo_spacing.initial_tick + to_uint_floor(ticks_filled)
    return validate_tick(tick)
