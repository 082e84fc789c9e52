from __future__ import annotations

import re

from .errors import MalformedAmount

# Largest power of ten applied with float division; 10**15 is exact in a double.
MAX_FLOAT_EXPONENT = 15

_DIGITS = re.compile(r"[0-9]+")


def parse_raw_amount(value: int | str) -> int:
    """Validate an on-chain amount expressed in the smallest denomination.

    Args:
        value: Non-negative integer, or its base-10 string form.

    Returns:
        The amount as a Python int.

    Raises:
        MalformedAmount: If ``value`` has a sign, whitespace, a decimal
            point or any other non-digit character, or is not an int/str.
    """
    if isinstance(value, bool):
        raise MalformedAmount(f"Expected an integer amount, got {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise MalformedAmount(f"Amount must be non-negative, got {value}")
        return value
    if isinstance(value, str) and _DIGITS.fullmatch(value):
        return int(value)
    raise MalformedAmount(f"Not a non-negative integer amount: {value!r}")


def parse_hex_amount(value: str) -> int:
    """Parse a ``0x``-prefixed quantity as returned by ``eth_call``."""
    if not isinstance(value, str) or not value.startswith("0x"):
        raise MalformedAmount(f"Not a hex quantity: {value!r}")
    if value == "0x":
        return 0
    try:
        return int(value, 16)
    except ValueError as e:
        raise MalformedAmount(f"Not a hex quantity: {value!r}") from e


def to_decimal(raw: int | str, exponent: int) -> float:
    """Convert a smallest-denomination amount to whole tokens.

    Args:
        raw: Integer amount (or its string form) in the chain's smallest unit.
        exponent: Number of decimal places of the token (6, 8, 9, 18, 24...).

    Returns:
        The amount in whole tokens as a float.

    Notes:
        - Digits beyond ``MAX_FLOAT_EXPONENT`` are removed with integer
          division on Python ints, so the float conversion only ever sees
          a value scaled by at most 10**15.
        - Precision loss is therefore limited to the trailing digits
          (below 10**-15 of a token, plus float rounding).
    """
    amount = parse_raw_amount(raw)
    if exponent < 0:
        raise ValueError(f"Exponent must be non-negative, got {exponent}")
    if amount == 0:
        return 0.0

    float_exponent = min(exponent, MAX_FLOAT_EXPONENT)
    int_exponent = exponent - float_exponent
    if int_exponent:
        amount //= 10**int_exponent
    return amount / 10**float_exponent
