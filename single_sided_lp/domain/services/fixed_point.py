from __future__ import annotations

from decimal import (
    ROUND_CEILING,
    ROUND_FLOOR,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
    localcontext,
)

from single_sided_lp.domain.exceptions import (
    ConversionOverflowError,
    DivideByZeroError,
    FixedPointOverflowError,
    FixedPointUnderflowError,
    MalformedDecimalError,
)


DECIMAL_PLACES = 18
QUANTUM = Decimal(f"1e-{DECIMAL_PLACES}")
ZERO = Decimal(0)
ONE = Decimal(1)

UINT64_MAX = 2**64 - 1
UINT128_MAX = 2**128 - 1
UINT256_MAX = 2**256 - 1
DECIMAL256_MAX = Decimal(f"{UINT256_MAX}e-{DECIMAL_PLACES}")

# Precisao suficiente para o produto exato de dois Decimal256.
_EXACT = Context(
    prec=160,
    rounding=ROUND_FLOOR,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)


def _finalize(value: Decimal, rounding: str = ROUND_FLOOR) -> Decimal:
    if value < 0:
        raise FixedPointUnderflowError(f"Cannot represent negative value {value}.")
    if value > DECIMAL256_MAX:
        raise FixedPointOverflowError(f"Value {value} exceeds Decimal256 range.")
    with localcontext(_EXACT):
        return value.quantize(QUANTUM, rounding=rounding)


def parse_decimal(value: str | int | Decimal, *, field_name: str = "value") -> Decimal:
    """Converte para Decimal256, truncando em 18 casas decimais."""
    if isinstance(value, bool):
        raise MalformedDecimalError(f"{field_name} must be a decimal, got {value!r}.")
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            raise MalformedDecimalError(f"{field_name} must not be empty.")
        try:
            parsed = Decimal(raw)
        except InvalidOperation as exc:
            raise MalformedDecimalError(f"{field_name} is not a decimal: {value!r}.") from exc
    elif isinstance(value, (int, Decimal)):
        parsed = Decimal(value)
    else:
        raise MalformedDecimalError(f"{field_name} must be a decimal, got {type(value).__name__}.")

    if not parsed.is_finite():
        raise MalformedDecimalError(f"{field_name} must be finite, got {value!r}.")
    if parsed < 0:
        raise MalformedDecimalError(f"{field_name} must not be negative, got {value!r}.")
    return _finalize(parsed, ROUND_FLOOR)


def checked_add(a: Decimal, b: Decimal) -> Decimal:
    with localcontext(_EXACT):
        total = a + b
    return _finalize(total)


def checked_sub(a: Decimal, b: Decimal) -> Decimal:
    if b > a:
        raise FixedPointUnderflowError(f"Cannot subtract {b} from {a}.")
    with localcontext(_EXACT):
        diff = a - b
    return _finalize(diff)


def checked_mul(a: Decimal, b: Decimal, *, rounding: str = ROUND_FLOOR) -> Decimal:
    with localcontext(_EXACT):
        product = a * b
    return _finalize(product, rounding)


def checked_div(a: Decimal, b: Decimal, *, rounding: str = ROUND_FLOOR) -> Decimal:
    if b == 0:
        raise DivideByZeroError(f"Cannot divide {a} by zero.")
    with localcontext(_EXACT):
        quotient = a / b
    return _finalize(quotient, rounding)


def checked_sqrt(value: Decimal) -> Decimal:
    if value < 0:
        raise FixedPointUnderflowError(f"Cannot take square root of {value}.")
    with localcontext(_EXACT):
        root = value.sqrt()
    return _finalize(root, ROUND_FLOOR)


def pow_ten(exponent: int) -> Decimal:
    # Exato mesmo abaixo de 1e-18; quem consome decide se trunca.
    return Decimal(f"1e{exponent}")


def to_uint_floor(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def to_uint_ceil(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_CEILING))


def round_to_uint(value: Decimal, *, round_up: bool) -> int:
    return to_uint_ceil(value) if round_up else to_uint_floor(value)


def checked_uint_sub(a: int, b: int) -> int:
    if b > a:
        raise FixedPointUnderflowError(f"Cannot subtract {b} from {a}.")
    return a - b


def checked_uint128(value: int) -> int:
    if value < 0 or value > UINT128_MAX:
        raise ConversionOverflowError(f"Value {value} does not fit in Uint128.")
    return value


def format_decimal(value: Decimal) -> str:
    if value == 0:
        return "0"
    with localcontext(_EXACT):
        return format(value.normalize(), "f")


def exact_context():
    """Contexto para expressoes intermediarias sem arredondamento."""
    return localcontext(_EXACT)
