from __future__ import annotations

import re

from tripledger.services.money import to_minor_units
from tripledger.services.validation import validate_currency_code


# "12.50", "12,50 eur", "-3 USD"
MONEY_RE = re.compile(r"^\s*(-?\d+(?:[.,]\d+)?)\s*([A-Za-z]{3})?\s*$")


def parse_money(text: str, default_currency: str = "EUR") -> tuple[int, str]:
    """Parse user input like ``"12.50 EUR"`` into ``(1250, "EUR")``."""
    match = MONEY_RE.match(text)
    if not match:
        raise ValueError(f"Cannot parse amount: {text!r}")

    amount = to_minor_units(match.group(1).replace(",", "."))
    currency = (match.group(2) or default_currency).upper()
    validate_currency_code(currency)
    return amount, currency
