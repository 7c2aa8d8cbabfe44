from __future__ import annotations

import heapq
from typing import Iterable, List

from tripledger.errors import CurrencyMismatchError
from tripledger.logging import get_logger
from tripledger.models import Settlement, UserBalance

log = get_logger(__name__)


def optimize_settlements(balances: Iterable[UserBalance]) -> List[Settlement]:
    """Greedy largest-first matching of debtors to creditors.

    Each step pairs the creditor with the largest remaining balance with the
    debtor owing the most. Equal amounts are ordered by ``user_id``. Every
    step clears at least one side, so n non-zero balances settle in at most
    n - 1 transfers.
    """
    balances = list(balances)
    currencies = {balance.currency for balance in balances}
    if len(currencies) > 1:
        raise CurrencyMismatchError(
            "balances must share one currency",
            {"currencies": ",".join(sorted(currencies))},
        )

    names = {balance.user_id: balance.user_name for balance in balances}
    creditors: list[tuple[int, str]] = []
    debtors: list[tuple[int, str]] = []

    for balance in balances:
        if balance.net_balance > 0:
            creditors.append((-balance.net_balance, balance.user_id))
        elif balance.net_balance < 0:
            debtors.append((balance.net_balance, balance.user_id))

    # Diagnostic only; may exceed int64 while every transfer still fits.
    residual = sum(balance.net_balance for balance in balances)
    if residual != 0:
        log.warning("settlement.unbalanced", residual=residual)

    heapq.heapify(creditors)
    heapq.heapify(debtors)

    transfers: list[Settlement] = []
    while creditors and debtors:
        cred_neg, cred_id = heapq.heappop(creditors)
        debt_neg, debt_id = heapq.heappop(debtors)
        cred_amount, debt_amount = -cred_neg, -debt_neg

        transfer_amount = min(cred_amount, debt_amount)
        transfers.append(
            Settlement(
                from_user_id=debt_id,
                to_user_id=cred_id,
                amount=transfer_amount,
                currency=balances[0].currency,
                from_user_name=names.get(debt_id),
                to_user_name=names.get(cred_id),
            )
        )

        cred_amount -= transfer_amount
        debt_amount -= transfer_amount

        if cred_amount > 0:
            heapq.heappush(creditors, (-cred_amount, cred_id))
        if debt_amount > 0:
            heapq.heappush(debtors, (-debt_amount, debt_id))

    return transfers
