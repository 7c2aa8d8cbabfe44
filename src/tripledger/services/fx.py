from __future__ import annotations

import math
from decimal import Decimal, localcontext
from typing import Sequence

from tripledger.errors import InvalidExpenseError
from tripledger.models import ConversionResult, Expense
from tripledger.services.money import round_half_away, to_decimal


def rate_as_decimal(fx_rate: float) -> Decimal:
    if isinstance(fx_rate, bool) or not isinstance(fx_rate, (int, float, Decimal)):
        raise InvalidExpenseError("fx_rate must be a number", {"fx_rate": fx_rate})
    if isinstance(fx_rate, float) and not math.isfinite(fx_rate):
        raise InvalidExpenseError("fx_rate must be finite", {"fx_rate": fx_rate})
    rate = to_decimal(fx_rate)
    if rate <= 0:
        raise InvalidExpenseError("fx_rate must be positive", {"fx_rate": fx_rate})
    return rate


def scale(amount: int, rate: Decimal) -> int:
    with localcontext() as ctx:
        ctx.prec = 60
        return round_half_away(Decimal(amount) * rate)


def convert_amount(amount: int, fx_rate: float) -> int:
    return scale(amount, rate_as_decimal(fx_rate))


def convert_expense_to_base_currency(expense: Expense, base_currency: str) -> ConversionResult:
    """Convert an expense's amount into ``base_currency``.

    Uses the rate snapshot stored on the expense, never a live rate, so the
    result for a given expense is always the same. A foreign-currency expense
    without a snapshot yields ``needs_fx_rate=True`` and an amount of 0.
    """
    if expense.currency == base_currency:
        return ConversionResult(amount=expense.amount, currency=base_currency, needs_fx_rate=False)

    if expense.fx_rate is None:
        return ConversionResult(amount=0, currency=base_currency, needs_fx_rate=True)

    return ConversionResult(
        amount=convert_amount(expense.amount, expense.fx_rate),
        currency=base_currency,
        needs_fx_rate=False,
    )


def convert_shares(shares: Sequence[int], fx_rate: float) -> list[int]:
    # Cumulative rounding: converted shares add up to round(sum(shares) * rate).
    rate = rate_as_decimal(fx_rate)
    converted: list[int] = []
    running = 0
    previous = 0
    for share in shares:
        running += share
        current = scale(running, rate)
        converted.append(current - previous)
        previous = current
    return converted


def calculate_inverse_rate(rate: float) -> float:
    if rate == 0:
        raise ValueError("Cannot calculate inverse of zero rate")
    return 1 / rate
