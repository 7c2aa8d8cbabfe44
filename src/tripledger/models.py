from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional


@dataclass(slots=True)
class ExpenseParticipantShare:
    user_id: str
    share_amount: int
    user_name: Optional[str] = None


@dataclass(slots=True)
class Expense:
    """One shared expense with shares already resolved to minor units.

    ``fx_rate`` is the snapshot taken when the expense was recorded; it
    converts ``currency`` into the trip's base currency.
    """

    id: str
    amount: int
    currency: str
    payer_id: str
    participants: list[ExpenseParticipantShare] = field(default_factory=list)
    fx_rate: Optional[float] = None
    payer_name: Optional[str] = None


@dataclass(slots=True, frozen=True)
class ConversionResult:
    amount: int
    currency: str
    needs_fx_rate: bool


@dataclass(slots=True, frozen=True)
class UserBalance:
    user_id: str
    user_name: str
    net_balance: int
    currency: str


@dataclass(slots=True, frozen=True)
class Settlement:
    from_user_id: str
    to_user_id: str
    amount: int
    currency: str
    from_user_name: Optional[str] = None
    to_user_name: Optional[str] = None


@dataclass(slots=True, frozen=True)
class ShareSumMismatch:
    expense_id: str
    expected: int
    actual: int

    @property
    def difference(self) -> int:
        return self.actual - self.expected


@dataclass(slots=True, frozen=True)
class SettlementSummary:
    base_currency: str
    balances: tuple[UserBalance, ...]
    settlements: tuple[Settlement, ...]
    total_expenses: int
    total_amount: int
    excluded_expenses: tuple[str, ...]

    def balance_for(self, user_id: str) -> Optional[UserBalance]:
        for balance in self.balances:
            if balance.user_id == user_id:
                return balance
        return None

    @property
    def is_settled(self) -> bool:
        return all(balance.net_balance == 0 for balance in self.balances)


def build_expenses(rows: Iterable[Mapping[str, Any]]) -> list[Expense]:
    expenses: list[Expense] = []
    for row in rows:
        participants = [
            ExpenseParticipantShare(
                user_id=participant["user_id"],
                share_amount=participant["share_amount"],
                user_name=participant.get("user_name"),
            )
            for participant in row.get("participants") or []
        ]
        expenses.append(
            Expense(
                id=row["id"],
                amount=row["amount"],
                currency=row["currency"],
                payer_id=row["payer_id"],
                participants=participants,
                fx_rate=row.get("fx_rate"),
                payer_name=row.get("payer_name"),
            )
        )
    return expenses
