"""
Ledger exception hierarchy.

Everything the engine raises derives from LedgerError. A missing FX rate is
not an error and never shows up here.
"""

from __future__ import annotations

from typing import Any, Optional


class LedgerError(Exception):
    """Base exception for all ledger errors"""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class InvalidExpenseError(LedgerError, ValueError):
    """Raised when an expense is structurally invalid (caller bug)"""
    pass


class InvalidCurrencyError(InvalidExpenseError):
    """Raised for malformed ISO 4217 currency codes"""
    pass


class CurrencyMismatchError(LedgerError, ValueError):
    """Raised when balances in different currencies are settled together"""
    pass


class MoneyOverflowError(LedgerError, OverflowError):
    """Raised when a minor-unit value leaves the signed 64-bit range"""
    pass


class ShareSumMismatchError(LedgerError):
    """Raised in strict mode when participant shares don't add up"""

    def __init__(self, mismatches: list, message: Optional[str] = None) -> None:
        self.mismatches = list(mismatches)
        super().__init__(
            message or "participant shares do not sum to expense amount",
            {"expenses": ",".join(str(m.expense_id) for m in self.mismatches)},
        )
