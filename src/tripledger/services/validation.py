from __future__ import annotations

import re
from typing import Iterable

from tripledger.errors import InvalidCurrencyError, InvalidExpenseError
from tripledger.models import Expense, ShareSumMismatch
from tripledger.services.fx import rate_as_decimal
from tripledger.services.money import ensure_int64

CURRENCY_CODE_RE = re.compile(r"^[A-Z]{3}$")


def validate_currency_code(code: object) -> str:
    if not isinstance(code, str) or not CURRENCY_CODE_RE.match(code):
        raise InvalidCurrencyError("currency must be a three-letter ISO 4217 code", {"currency": code})
    return code


def _require_id(value: object, field: str, expense_id: object) -> None:
    if not isinstance(value, str) or not value.strip():
        raise InvalidExpenseError(f"{field} must be a non-empty string", {"expense_id": expense_id})


def _require_minor_units(value: object, field: str, expense_id: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidExpenseError(f"{field} must be an integer of minor units", {"expense_id": expense_id})
    return ensure_int64(value)


def validate_expense(expense: Expense) -> Expense:
    """Fail fast on structurally broken input.

    Share totals are not checked here; see ``find_share_mismatches``.
    """
    _require_id(expense.id, "id", expense.id)
    _require_id(expense.payer_id, "payer_id", expense.id)
    _require_minor_units(expense.amount, "amount", expense.id)
    validate_currency_code(expense.currency)

    if expense.fx_rate is not None:
        rate_as_decimal(expense.fx_rate)

    if not isinstance(expense.participants, (list, tuple)):
        raise InvalidExpenseError("participants must be a list", {"expense_id": expense.id})

    for participant in expense.participants:
        _require_id(participant.user_id, "participant user_id", expense.id)
        _require_minor_units(participant.share_amount, "share_amount", expense.id)

    return expense


def find_share_mismatches(expenses: Iterable[Expense]) -> list[ShareSumMismatch]:
    mismatches: list[ShareSumMismatch] = []
    for expense in expenses:
        actual = sum(participant.share_amount for participant in expense.participants)
        if actual != expense.amount:
            mismatches.append(ShareSumMismatch(expense_id=expense.id, expected=expense.amount, actual=actual))
    return mismatches
