from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Mapping, Optional, Sequence, Union

from tripledger.errors import InvalidExpenseError, ShareSumMismatchError
from tripledger.models import ExpenseParticipantShare, ShareSumMismatch
from tripledger.services.money import to_decimal


@dataclass(slots=True, frozen=True)
class EqualSplit:
    pass


@dataclass(slots=True, frozen=True)
class PercentageSplit:
    value: Union[Decimal, float, int, str]


@dataclass(slots=True, frozen=True)
class CustomAmountSplit:
    value: int


@dataclass(slots=True, frozen=True)
class SharesSplit:
    value: Union[Decimal, float, int, str]


SplitSpec = Union[EqualSplit, PercentageSplit, CustomAmountSplit, SharesSplit]


def split_amount(amount: int, consumers: Sequence[str]) -> dict[str, int]:
    if not consumers:
        raise InvalidExpenseError("consumers must not be empty")

    sign = -1 if amount < 0 else 1
    base_share, remainder = divmod(abs(amount), len(consumers))
    shares = [base_share + (1 if idx < remainder else 0) for idx in range(len(consumers))]
    return {consumer: sign * share for consumer, share in zip(consumers, shares)}


def allocate_by_weights(amount: int, weights: Mapping[str, Fraction]) -> dict[str, int]:
    """Largest-remainder allocation of ``amount`` proportionally to ``weights``.

    Leftover units go to the largest fractional parts, earlier users first on
    ties, so the result always sums to ``amount``.
    """
    total_weight = sum(weights.values(), Fraction(0))
    if total_weight <= 0:
        raise InvalidExpenseError("split weights must be positive")

    sign = -1 if amount < 0 else 1
    magnitude = abs(amount)
    floors: dict[str, int] = {}
    fractions: list[tuple[Fraction, int, str]] = []
    for order, (user_id, weight) in enumerate(weights.items()):
        exact = magnitude * weight / total_weight
        floors[user_id] = exact.numerator // exact.denominator
        fractions.append((exact - floors[user_id], order, user_id))

    leftover = magnitude - sum(floors.values())
    fractions.sort(key=lambda item: (-item[0], item[1]))
    for _, _, user_id in fractions[:leftover]:
        floors[user_id] += 1

    return {user_id: sign * share for user_id, share in floors.items()}


def _weight(value: object, user_id: str) -> Fraction:
    try:
        weight = Fraction(to_decimal(value))  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise InvalidExpenseError("split value must be numeric", {"user_id": user_id}) from exc
    if weight < 0:
        raise InvalidExpenseError("split value must not be negative", {"user_id": user_id})
    return weight


def resolve_split(
    amount: int,
    specs: Mapping[str, SplitSpec],
    expense_id: Optional[str] = None,
) -> dict[str, int]:
    if not specs:
        if amount == 0:
            return {}
        raise InvalidExpenseError("expense must have participants", {"expense_id": expense_id})

    kinds = {type(spec) for spec in specs.values()}
    if len(kinds) > 1:
        raise InvalidExpenseError("cannot mix split types in one expense", {"expense_id": expense_id})
    kind = kinds.pop()

    if kind is EqualSplit:
        return split_amount(amount, list(specs))

    if kind is CustomAmountSplit:
        shares = {}
        for user_id, spec in specs.items():
            if isinstance(spec.value, bool) or not isinstance(spec.value, int):
                raise InvalidExpenseError("custom split amount must be an integer", {"user_id": user_id})
            shares[user_id] = spec.value
        actual = sum(shares.values())
        if actual != amount:
            raise ShareSumMismatchError(
                [ShareSumMismatch(expense_id=expense_id or "", expected=amount, actual=actual)]
            )
        return shares

    weights = {user_id: _weight(spec.value, user_id) for user_id, spec in specs.items()}

    if kind is PercentageSplit:
        if sum(weights.values(), Fraction(0)) != 100:
            raise InvalidExpenseError("percentages must total 100", {"expense_id": expense_id})
    elif any(weight == 0 for weight in weights.values()):
        raise InvalidExpenseError("share weights must be positive", {"expense_id": expense_id})

    return allocate_by_weights(amount, weights)


def to_participant_shares(
    shares: Mapping[str, int],
    names: Optional[Mapping[str, str]] = None,
) -> list[ExpenseParticipantShare]:
    names = names or {}
    return [
        ExpenseParticipantShare(user_id=user_id, share_amount=amount, user_name=names.get(user_id))
        for user_id, amount in shares.items()
    ]
