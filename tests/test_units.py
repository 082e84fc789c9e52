from __future__ import annotations

from fractions import Fraction

import pytest

from validator_dashboard.errors import MalformedAmount
from validator_dashboard.units import parse_hex_amount, parse_raw_amount, to_decimal


def test_to_decimal_small_amounts_are_exact():
    assert to_decimal("1500000", 6) == 1.5
    assert to_decimal(123_456_789, 8) == 1.23456789
    assert to_decimal("1", 0) == 1.0


@pytest.mark.parametrize("exponent", [0, 6, 8, 18, 24])
def test_to_decimal_zero(exponent):
    assert to_decimal("0", exponent) == 0
    assert to_decimal(0, exponent) == 0


@pytest.mark.parametrize("exponent", [6, 8, 18, 24])
@pytest.mark.parametrize(
    "raw",
    [
        1,
        999,
        10**15 + 1,
        2**53 + 1,
        123456789012345678901234567,
        987654321098765432109876543210,
        10**30,
    ],
)
def test_to_decimal_precision_is_confined_to_trailing_digits(raw, exponent):
    exact = Fraction(raw, 10**exponent)
    value = to_decimal(str(raw), exponent)

    # Truncated digits are below 10**-15 of a token; the float carries
    # a relative rounding error of at most 2**-53.
    tolerance = Fraction(1, 10**15) + exact * Fraction(1, 2**52)
    assert abs(Fraction(value) - exact) <= tolerance


def test_to_decimal_large_18_decimal_supply():
    # 1.2 billion tokens with 18 decimals exceeds 2**53 in the smallest unit.
    assert to_decimal("1200000000000000000000000000", 18) == 1_200_000_000.0


@pytest.mark.parametrize(
    "bad", ["-5", "12a", "1.5", " 1", "1 ", "", "0x10", "+3", "١٢"]
)
def test_to_decimal_rejects_non_digit_strings(bad):
    with pytest.raises(MalformedAmount):
        to_decimal(bad, 6)


@pytest.mark.parametrize("bad", [-1, True, None, 1.5, b"12"])
def test_parse_raw_amount_rejects_non_integers(bad):
    with pytest.raises(MalformedAmount):
        parse_raw_amount(bad)


def test_malformed_amount_is_a_value_error():
    with pytest.raises(ValueError):
        to_decimal("abc", 6)


def test_to_decimal_rejects_negative_exponent():
    with pytest.raises(ValueError, match="Exponent"):
        to_decimal("1", -1)


def test_parse_hex_amount():
    assert parse_hex_amount("0x0") == 0
    assert parse_hex_amount("0x") == 0
    assert parse_hex_amount("0xde0b6b3a7640000") == 10**18
    with pytest.raises(MalformedAmount):
        parse_hex_amount("123")
    with pytest.raises(MalformedAmount):
        parse_hex_amount("0xzz")
