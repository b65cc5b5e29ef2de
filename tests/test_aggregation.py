"""Tests for period windows and transaction folds."""

from __future__ import annotations

from datetime import datetime

import pytest

from wealthlog.errors import ValidationError
from wealthlog.models import Transaction
from wealthlog.services.aggregation import (
    bucket_by_month,
    fold_transactions,
    month_window,
    percentage,
    period_window,
    rolling_months,
    round_half_up,
    savings_rate,
)

NOW = datetime(2024, 6, 15, 12, 0)


def _tx(amount: float, kind: str, category_id: int | None = 1, when: datetime = NOW) -> Transaction:
    return Transaction(
        user_id=1,
        category_id=category_id,
        transaction_type=kind,
        amount=amount,
        description="row",
        occurred_at=when,
    )


def test_round_half_up_rounds_halves_upwards():
    assert round_half_up(82.5) == 83
    assert round_half_up(2.5) == 3
    assert round_half_up(83.33) == 83
    assert round_half_up(0.49) == 0


def test_percentage_never_divides_by_zero():
    assert percentage(50, 0) == 0.0
    assert percentage(50, -10) == 0.0
    assert percentage(25, 100) == pytest.approx(25.0)


def test_savings_rate_is_zero_without_income():
    assert savings_rate(0, 500) == 0.0


def test_month_window_defaults_to_current_month():
    window = month_window(now=NOW)
    assert window.start == datetime(2024, 6, 1)
    assert window.end == datetime(2024, 7, 1)
    assert window.to_dict()["monthName"] == "June"


def test_month_window_december_rolls_into_next_year():
    window = month_window(12, 2023, now=NOW)
    assert window.end == datetime(2024, 1, 1)


@pytest.mark.parametrize(
    ("month", "year", "field"),
    [(13, 2024, "month"), (0, 2024, "month"), (6, 1999, "year"), (6, 2101, "year")],
)
def test_month_window_rejects_out_of_range(month, year, field):
    with pytest.raises(ValidationError) as excinfo:
        month_window(month, year, now=NOW)
    assert excinfo.value.status_code == 400
    assert excinfo.value.details[0]["field"] == field


def test_month_window_is_half_open():
    window = month_window(6, 2024, now=NOW)
    assert window.contains(datetime(2024, 6, 1))
    assert window.contains(datetime(2024, 6, 30, 23, 59, 59))
    assert not window.contains(datetime(2024, 7, 1))


def test_rolling_months_oldest_first():
    windows = rolling_months(3, now=datetime(2024, 2, 10))
    assert [w.key for w in windows] == ["2023-12", "2024-01", "2024-02"]
    assert windows[-1].end == datetime(2024, 3, 1)
    assert windows[0].label == "Dec 2023"


@pytest.mark.parametrize("months", [0, 25])
def test_rolling_months_bounds(months):
    with pytest.raises(ValidationError):
        rolling_months(months, now=NOW)


def test_period_window_keywords():
    assert period_window("week", now=NOW).start == datetime(2024, 6, 8, 12, 0)
    assert period_window("month", now=NOW).start == datetime(2024, 6, 1)
    assert period_window("year", now=NOW).start == datetime(2024, 1, 1)
    assert period_window("year", now=NOW).end is None
    with pytest.raises(ValidationError):
        period_window("decade", now=NOW)


def test_fold_transactions_totals_and_ordering():
    rows = [
        _tx(15000, "income", 1),
        _tx(1000, "expense", 2),
        _tx(1500, "expense", 3),
        _tx(0.1, "expense", 2),
        _tx(0.2, "expense", 2),
    ]
    fold = fold_transactions(rows, {1: "Salary", 2: "Food & Dining", 3: "Shopping"})

    assert fold.income.total == 15000
    assert fold.expense.total == pytest.approx(2500.3)
    assert fold.expense.count == 4
    assert fold.transaction_count == 5
    assert fold.net_income == pytest.approx(12499.7)

    expenses = fold.categories_of("expense")
    assert [g.name for g in expenses] == ["Shopping", "Food & Dining"]
    assert expenses[1].total == pytest.approx(1000.3)
    assert expenses[1].count == 3


def test_fold_ties_sorted_by_name():
    fold = fold_transactions(
        [_tx(100, "expense", 2), _tx(100, "expense", 1)], {1: "Bravo", 2: "Alpha"}
    )
    assert [g.name for g in fold.categories] == ["Alpha", "Bravo"]


def test_fold_unknown_category_is_uncategorized():
    fold = fold_transactions([_tx(10, "expense", 99)])
    assert fold.categories[0].name == "Uncategorized"


def test_empty_fold_has_no_data():
    fold = fold_transactions([])
    assert not fold.has_data
    assert fold.savings_rate == 0.0
    assert fold.net_income == 0


def test_bucket_by_month_ignores_rows_outside_windows():
    windows = rolling_months(2, now=NOW)
    rows = [
        _tx(100, "income", when=datetime(2024, 5, 3)),
        _tx(40, "expense", when=datetime(2024, 6, 3)),
        _tx(999, "income", when=datetime(2023, 1, 1)),
    ]
    buckets = bucket_by_month(rows, windows)
    assert buckets["2024-05"].income.total == 100
    assert buckets["2024-06"].expense.total == 40
    assert "2023-01" not in buckets
