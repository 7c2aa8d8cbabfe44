from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from tripledger.logging import get_logger
from tripledger.models import Expense, UserBalance
from tripledger.services.fx import convert_expense_to_base_currency, convert_shares
from tripledger.services.money import checked_add
from tripledger.services.validation import validate_currency_code, validate_expense

log = get_logger(__name__)


@dataclass(slots=True)
class LedgerTotals:
    balances: list[UserBalance] = field(default_factory=list)
    included_count: int = 0
    total_amount: int = 0
    excluded_expenses: list[str] = field(default_factory=list)


class _Accumulator:
    def __init__(self) -> None:
        self._net: dict[str, int] = {}
        self._names: dict[str, Optional[str]] = {}

    def touch(self, user_id: str, user_name: Optional[str]) -> None:
        if user_id not in self._net:
            self._net[user_id] = 0
        if user_name and not self._names.get(user_id):
            self._names[user_id] = user_name

    def apply(self, user_id: str, user_name: Optional[str], delta: int) -> None:
        self.touch(user_id, user_name)
        self._net[user_id] = checked_add(self._net[user_id], delta)

    def to_balances(self, currency: str) -> list[UserBalance]:
        return [
            UserBalance(
                user_id=user_id,
                user_name=self._names.get(user_id) or user_id,
                net_balance=net,
                currency=currency,
            )
            for user_id, net in self._net.items()
        ]


def aggregate_balances(expenses: Sequence[Expense], base_currency: str) -> LedgerTotals:
    """Fold expenses into one signed net balance per user.

    The payer is credited with the converted amount and every participant is
    debited with their converted share. Foreign-currency expenses without a
    rate snapshot are skipped and reported in ``excluded_expenses``.
    Balances come back in order of first appearance.
    """
    validate_currency_code(base_currency)
    totals = LedgerTotals()
    accumulator = _Accumulator()

    for expense in expenses:
        validate_expense(expense)
        conversion = convert_expense_to_base_currency(expense, base_currency)
        if conversion.needs_fx_rate:
            log.warning(
                "fx.rate_missing",
                expense_id=expense.id,
                currency=expense.currency,
                base_currency=base_currency,
            )
            totals.excluded_expenses.append(expense.id)
            continue

        shares = [participant.share_amount for participant in expense.participants]
        if expense.currency != base_currency:
            shares = convert_shares(shares, expense.fx_rate)  # type: ignore[arg-type]

        accumulator.apply(expense.payer_id, expense.payer_name, conversion.amount)
        for participant, share in zip(expense.participants, shares):
            accumulator.apply(participant.user_id, participant.user_name, -share)

        totals.included_count += 1
        # display total, not bounded to int64
        totals.total_amount += conversion.amount

    totals.balances = accumulator.to_balances(base_currency)
    return totals


def calculate_user_balances(expenses: Sequence[Expense], base_currency: str) -> list[UserBalance]:
    return aggregate_balances(expenses, base_currency).balances
