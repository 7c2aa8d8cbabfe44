"""Ledger and settlement engine for shared trip expenses."""

from tripledger.errors import (
    CurrencyMismatchError,
    InvalidCurrencyError,
    InvalidExpenseError,
    LedgerError,
    MoneyOverflowError,
    ShareSumMismatchError,
)
from tripledger.models import (
    ConversionResult,
    Expense,
    ExpenseParticipantShare,
    Settlement,
    SettlementSummary,
    ShareSumMismatch,
    UserBalance,
    build_expenses,
)
from tripledger.services.money import format_currency, to_major_units, to_minor_units
from tripledger.services.summary import compute_settlement_summary

__all__ = [
    "ConversionResult",
    "CurrencyMismatchError",
    "Expense",
    "ExpenseParticipantShare",
    "InvalidCurrencyError",
    "InvalidExpenseError",
    "LedgerError",
    "MoneyOverflowError",
    "Settlement",
    "SettlementSummary",
    "ShareSumMismatch",
    "ShareSumMismatchError",
    "UserBalance",
    "build_expenses",
    "compute_settlement_summary",
    "format_currency",
    "to_major_units",
    "to_minor_units",
]
