import pytest

from tripledger.errors import InvalidExpenseError, ShareSumMismatchError
from tripledger.models import Expense
from tripledger.services.balances import calculate_user_balances
from tripledger.services.split import (
    CustomAmountSplit,
    EqualSplit,
    PercentageSplit,
    SharesSplit,
    resolve_split,
    split_amount,
    to_participant_shares,
)


def test_split_amount_even():
    shares = split_amount(1000, ["a", "b", "c", "d"])
    assert shares == {"a": 250, "b": 250, "c": 250, "d": 250}


def test_split_amount_remainder():
    shares = split_amount(1001, ["a", "b", "c"])
    assert sum(shares.values()) == 1001
    assert shares == {"a": 334, "b": 334, "c": 333}
    assert split_amount(10000, ["alice", "bob", "charlie"]) == {"alice": 3334, "bob": 3333, "charlie": 3333}


def test_split_amount_refund():
    assert split_amount(-1001, ["a", "b", "c"]) == {"a": -334, "b": -334, "c": -333}


def test_percentage_split():
    specs = {"alice": PercentageSplit(50), "bob": PercentageSplit(30), "charlie": PercentageSplit(20)}
    assert resolve_split(20000, specs) == {"alice": 10000, "bob": 6000, "charlie": 4000}

    uneven = {"a": PercentageSplit("33.33"), "b": PercentageSplit("33.33"), "c": PercentageSplit("33.34")}
    assert resolve_split(10001, uneven) == {"a": 3333, "b": 3333, "c": 3335}


def test_percentage_must_total_hundred():
    with pytest.raises(InvalidExpenseError):
        resolve_split(1000, {"a": PercentageSplit(60), "b": PercentageSplit(30)})


def test_weighted_shares():
    assert resolve_split(100, {"a": SharesSplit(1), "b": SharesSplit(1), "c": SharesSplit(1)}) == {
        "a": 34,
        "b": 33,
        "c": 33,
    }
    assert resolve_split(1000, {"a": SharesSplit(2), "b": SharesSplit(1)}) == {"a": 667, "b": 333}

    with pytest.raises(InvalidExpenseError):
        resolve_split(1000, {"a": SharesSplit(0), "b": SharesSplit(1)})


def test_custom_amounts():
    specs = {"alice": CustomAmountSplit(4000), "bob": CustomAmountSplit(3000), "charlie": CustomAmountSplit(5000)}
    assert resolve_split(12000, specs) == {"alice": 4000, "bob": 3000, "charlie": 5000}

    with pytest.raises(ShareSumMismatchError) as excinfo:
        resolve_split(12001, specs, expense_id="exp1")
    assert excinfo.value.mismatches[0].difference == -1


def test_mixed_and_empty_specs():
    with pytest.raises(InvalidExpenseError):
        resolve_split(1000, {"a": EqualSplit(), "b": PercentageSplit(100)})
    with pytest.raises(InvalidExpenseError):
        resolve_split(1000, {})
    assert resolve_split(0, {}) == {}


def test_resolved_splits_feed_balances():
    equal = resolve_split(3000, {"1": EqualSplit(), "2": EqualSplit(), "3": EqualSplit()})
    itemised = resolve_split(1500, {"1": CustomAmountSplit(350), "2": CustomAmountSplit(750), "3": CustomAmountSplit(400)})
    expenses = [
        Expense(
            id="exp1",
            amount=3000,
            currency="EUR",
            payer_id="1",
            participants=to_participant_shares(equal),
        ),
        Expense(
            id="exp2",
            amount=1500,
            currency="EUR",
            payer_id="2",
            participants=to_participant_shares(itemised, names={"2": "Bob"}),
        ),
    ]

    balances = {b.user_id: b for b in calculate_user_balances(expenses, "EUR")}

    assert sum(b.net_balance for b in balances.values()) == 0
    assert balances["1"].net_balance == 1650
    assert balances["2"].net_balance == -250
    assert balances["2"].user_name == "Bob"
