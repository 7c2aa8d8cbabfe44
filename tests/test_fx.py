import pytest

from tripledger.errors import InvalidExpenseError
from tripledger.models import Expense
from tripledger.services.fx import (
    calculate_inverse_rate,
    convert_amount,
    convert_expense_to_base_currency,
    convert_shares,
)


def _expense(amount: int, currency: str, fx_rate=None) -> Expense:
    return Expense(id="exp1", amount=amount, currency=currency, payer_id="alice", fx_rate=fx_rate)


def test_same_currency_passes_through():
    result = convert_expense_to_base_currency(_expense(10000, "EUR", fx_rate=1.5), "EUR")
    assert result.amount == 10000
    assert result.currency == "EUR"
    assert result.needs_fx_rate is False


def test_uses_stored_rate_snapshot():
    result = convert_expense_to_base_currency(_expense(10000, "USD", fx_rate=0.85), "EUR")
    assert result.amount == 8500
    assert result.currency == "EUR"
    assert result.needs_fx_rate is False

    assert convert_expense_to_base_currency(_expense(10000, "EUR", fx_rate=1.10), "USD").amount == 11000
    assert convert_expense_to_base_currency(_expense(10000, "GBP", fx_rate=0.625), "USD").amount == 6250


def test_missing_rate_is_flagged_not_raised():
    result = convert_expense_to_base_currency(_expense(500000, "JPY"), "USD")
    assert result.amount == 0
    assert result.currency == "USD"
    assert result.needs_fx_rate is True


def test_conversion_is_deterministic():
    expense = _expense(123457, "USD", fx_rate=0.917)
    results = {convert_expense_to_base_currency(expense, "EUR") for _ in range(5)}
    assert len(results) == 1


def test_convert_amount_rounds_half_away_from_zero():
    assert convert_amount(5, 0.5) == 3
    assert convert_amount(-5, 0.5) == -3


def test_convert_shares_keeps_total():
    assert convert_shares([3334, 3333, 3333], 0.5) == [1667, 1667, 1666]

    converted = convert_shares([3334, 3333, 3333], 0.85)
    assert converted == [2834, 2833, 2833]
    assert sum(converted) == convert_amount(10000, 0.85)


@pytest.mark.parametrize("rate", [0, -1.2, float("nan"), float("inf")])
def test_invalid_rates_rejected(rate):
    with pytest.raises(InvalidExpenseError):
        convert_expense_to_base_currency(_expense(100, "USD", fx_rate=rate), "EUR")


def test_calculate_inverse_rate():
    assert calculate_inverse_rate(2.0) == 0.5
    with pytest.raises(ValueError):
        calculate_inverse_rate(0)
