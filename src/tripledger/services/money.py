"""Minor-unit money arithmetic.

All amounts inside the engine are ``int`` counts of minor units. Conversion
to and from major units happens only at the display boundary.
"""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from tripledger.errors import MoneyOverflowError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

MINOR_PER_MAJOR = 100

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "AUD": "A$",
    "CAD": "C$",
    "INR": "₹",
    "KRW": "₩",
}

# ISO 4217 currencies without a minor unit
ZERO_DECIMAL_CURRENCIES = frozenset({"JPY", "KRW", "VND", "CLP", "ISK", "UGX", "XAF", "XOF"})

Number = Union[int, float, Decimal, str]


def ensure_int64(value: int) -> int:
    if value < INT64_MIN or value > INT64_MAX:
        raise MoneyOverflowError("amount exceeds signed 64-bit range", {"value": value})
    return value


def checked_add(*values: int) -> int:
    total = 0
    for value in values:
        total = ensure_int64(total + value)
    return total


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, bool):
        raise TypeError("amount must be a number, not bool")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError("amount must be finite")
        # repr gives the shortest string that round-trips, so 0.1 stays 0.1
        result = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation as exc:
            raise ValueError(f"not a number: {value!r}") from exc
    else:
        raise TypeError(f"unsupported amount type: {type(value).__name__}")

    if not result.is_finite():
        raise ValueError("amount must be finite")
    return result


def round_half_away(value: Decimal) -> int:
    if abs(value) > INT64_MAX + 1:
        raise MoneyOverflowError("amount exceeds signed 64-bit range", {"value": value})
    return ensure_int64(int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)))


def to_minor_units(major_amount: Number) -> int:
    """Convert a major-unit amount (``100.50``) to minor units (``10050``).

    Rounds half away from zero: ``100.999 -> 10100``, ``-25.5 -> -2550``.
    """
    return round_half_away(to_decimal(major_amount) * MINOR_PER_MAJOR)


def to_major_units(minor_amount: int) -> float:
    if isinstance(minor_amount, bool) or not isinstance(minor_amount, int):
        raise TypeError("minor_amount must be an int")
    return float(Decimal(minor_amount) / MINOR_PER_MAJOR)


def currency_exponent(currency_code: str) -> int:
    return 0 if currency_code.upper() in ZERO_DECIMAL_CURRENCIES else 2


def format_currency(minor_amount: int, currency_code: str) -> str:
    code = currency_code.upper()
    exponent = currency_exponent(code)
    symbol = CURRENCY_SYMBOLS.get(code, code)
    major = Decimal(abs(minor_amount)).scaleb(-exponent)
    sign = "-" if minor_amount < 0 else ""
    return f"{sign}{symbol}{major:.{exponent}f}"
