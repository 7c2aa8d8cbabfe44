from __future__ import annotations

from typing import Optional, Sequence

from tripledger.config import get_settings
from tripledger.errors import ShareSumMismatchError
from tripledger.logging import get_logger
from tripledger.models import Expense, SettlementSummary
from tripledger.services.balances import aggregate_balances
from tripledger.services.settlement import optimize_settlements
from tripledger.services.validation import find_share_mismatches

log = get_logger(__name__)


def compute_settlement_summary(
    expenses: Sequence[Expense],
    base_currency: str,
    *,
    strict: Optional[bool] = None,
) -> SettlementSummary:
    """Net balances and the transfers that settle them for one trip.

    ``strict`` rejects expenses whose shares don't sum to the amount with
    ``ShareSumMismatchError``; ``None`` falls back to ``LEDGER_STRICT_SHARES``.
    Expenses in a foreign currency without an FX snapshot are left out and
    listed in ``excluded_expenses``.
    """
    if strict is None:
        strict = get_settings().strict_shares

    # fails fast on structurally invalid expenses
    totals = aggregate_balances(expenses, base_currency)

    mismatches = find_share_mismatches(expenses)
    for mismatch in mismatches:
        log.warning(
            "ledger.share_mismatch",
            expense_id=mismatch.expense_id,
            expected=mismatch.expected,
            actual=mismatch.actual,
        )
    if strict and mismatches:
        raise ShareSumMismatchError(mismatches)

    settlements = optimize_settlements(totals.balances)

    log.debug(
        "summary.computed",
        base_currency=base_currency,
        included=totals.included_count,
        excluded=len(totals.excluded_expenses),
        settlements=len(settlements),
    )

    return SettlementSummary(
        base_currency=base_currency,
        balances=tuple(totals.balances),
        settlements=tuple(settlements),
        total_expenses=totals.included_count,
        total_amount=totals.total_amount,
        excluded_expenses=tuple(totals.excluded_expenses),
    )
