from __future__ import annotations

from decimal import ROUND_CEILING, Decimal

import pytest

from single_sided_lp.domain.exceptions import (
    CheckedArithmeticError,
    ConversionOverflowError,
    DivideByZeroError,
    FixedPointOverflowError,
    FixedPointUnderflowError,
    MalformedDecimalError,
)
from single_sided_lp.domain.services.fixed_point import (
    DECIMAL256_MAX,
    UINT128_MAX,
    checked_div,
    checked_mul,
    checked_sqrt,
    checked_sub,
    checked_uint128,
    format_decimal,
    parse_decimal,
    round_to_uint,
)


def test_parse_decimal_truncates_to_eighteen_places():
    assert parse_decimal("1.1234567890123456789") == Decimal("1.123456789012345678")
    assert parse_decimal(7) == Decimal("7")


@pytest.mark.parametrize("raw", ["", "abc", "-1", "NaN", "Infinity", True])
def test_parse_decimal_rejects_malformed_input(raw):
    with pytest.raises(MalformedDecimalError):
        parse_decimal(raw, field_name="sqrt_price")


def test_division_rounding_direction():
    assert checked_div(Decimal(1), Decimal(3)) == Decimal("0.333333333333333333")
    assert checked_div(Decimal(1), Decimal(3), rounding=ROUND_CEILING) == Decimal("0.333333333333333334")


def test_checked_errors():
    with pytest.raises(DivideByZeroError):
        checked_div(Decimal(1), Decimal(0))
    with pytest.raises(FixedPointUnderflowError):
        checked_sub(Decimal(1), Decimal(2))
    with pytest.raises(FixedPointOverflowError):
        checked_mul(DECIMAL256_MAX, Decimal(2))
    with pytest.raises(ConversionOverflowError):
        checked_uint128(UINT128_MAX + 1)


def test_checked_errors_are_arithmetic_errors():
    with pytest.raises(ArithmeticError):
        checked_sub(Decimal(0), Decimal("0.000000000000000001"))
    assert issubclass(DivideByZeroError, CheckedArithmeticError)


def test_sqrt_and_rounding_to_integers():
    assert checked_sqrt(Decimal(16)) == Decimal(4)
    assert checked_sqrt(Decimal(2)) == Decimal("1.414213562373095048")
    assert round_to_uint(Decimal("1.5"), round_up=True) == 2
    assert round_to_uint(Decimal("1.5"), round_up=False) == 1


def test_format_decimal():
    assert format_decimal(Decimal("1.500000000000000000")) == "1.5"
    assert format_decimal(Decimal("0E-18")) == "0"
    assert format_decimal(Decimal("1E+38")) == "100000000000000000000000000000000000000"
