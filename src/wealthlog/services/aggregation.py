"""Period windows and in-memory folds over transaction rows."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, Mapping, Optional

from ..constants.finance import EXPENSE, INCOME
from ..errors import ValidationError
from ..models.transaction import Transaction
from ..timeutils import (
    add_months,
    month_key,
    month_label,
    month_name,
    month_start,
    next_month_start,
    utcnow,
)

MIN_YEAR = 2000
MAX_YEAR = 2100
MAX_ROLLING_MONTHS = 24
PERIODS = ("week", "month", "year")
UNCATEGORIZED = "Uncategorized"


def round_half_up(value: float) -> int:
    """Round .5 upwards, matching what charting clients expect."""

    return int(math.floor(value + 0.5))


def percentage(part: float, whole: float) -> float:
    """``part`` as a percentage of ``whole``; 0 when ``whole`` is not positive."""

    if whole <= 0:
        return 0.0
    return part / whole * 100


def savings_rate(income: float, expenses: float) -> float:
    return percentage(income - expenses, income)


@dataclass(slots=True)
class PeriodWindow:
    """Half-open date window ``[start, end)``; ``end`` None means open-ended."""

    start: datetime
    end: Optional[datetime]
    month: Optional[int] = None
    year: Optional[int] = None

    @property
    def key(self) -> str:
        return month_key(self.start)

    @property
    def label(self) -> str:
        return month_label(self.start.year, self.start.month)

    def contains(self, moment: datetime) -> bool:
        if moment < self.start:
            return False
        return self.end is None or moment < self.end

    def to_dict(self) -> dict[str, object]:
        return {
            "month": self.month,
            "year": self.year,
            "startDate": self.start,
            "endDate": self.end,
            "monthName": month_name(self.month) if self.month else None,
        }


def month_window(
    month: Optional[int] = None, year: Optional[int] = None, *, now: Optional[datetime] = None
) -> PeriodWindow:
    """Calendar month window, defaulting to the current month.

    Raises:
        ValidationError: month outside 1..12 or year outside 2000..2100
    """

    now = now or utcnow()
    target_month = month if month is not None else now.month
    target_year = year if year is not None else now.year
    if not 1 <= target_month <= 12:
        raise ValidationError.for_field("month", "Month must be between 1 and 12")
    if not MIN_YEAR <= target_year <= MAX_YEAR:
        raise ValidationError.for_field(
            "year", f"Year must be between {MIN_YEAR} and {MAX_YEAR}"
        )
    return PeriodWindow(
        start=month_start(target_year, target_month),
        end=next_month_start(target_year, target_month),
        month=target_month,
        year=target_year,
    )


def rolling_months(months: int = 6, *, now: Optional[datetime] = None) -> list[PeriodWindow]:
    """Month windows ending with the current month, oldest first."""

    if not 1 <= months <= MAX_ROLLING_MONTHS:
        raise ValidationError.for_field(
            "months", f"Months must be between 1 and {MAX_ROLLING_MONTHS}"
        )
    now = now or utcnow()
    windows = []
    for offset in range(months - 1, -1, -1):
        year, month = add_months(now.year, now.month, -offset)
        windows.append(
            PeriodWindow(
                start=month_start(year, month),
                end=next_month_start(year, month),
                month=month,
                year=year,
            )
        )
    return windows


def period_window(period: str = "month", *, now: Optional[datetime] = None) -> PeriodWindow:
    """Open-ended window for the ``week``/``month``/``year`` keywords.

    ``week`` is the last seven days, ``month`` starts on the first of the
    current month and ``year`` on January 1st.
    """

    now = now or utcnow()
    if period == "week":
        start = now - timedelta(days=7)
    elif period == "month":
        start = month_start(now.year, now.month)
    elif period == "year":
        start = month_start(now.year, 1)
    else:
        raise ValidationError.for_field("period", "Period must be one of: week, month, year")
    return PeriodWindow(start=start, end=None)


@dataclass(slots=True)
class TypeTotals:
    total: float = 0.0
    count: int = 0

    @property
    def average(self) -> float:
        return self.total / self.count if self.count else 0.0


@dataclass(slots=True)
class CategoryTotals:
    """Totals for one (category, type) pair."""

    category_id: Optional[int]
    name: str
    transaction_type: str
    total: float = 0.0
    count: int = 0

    @property
    def average(self) -> float:
        return self.total / self.count if self.count else 0.0


@dataclass(slots=True)
class PeriodFold:
    """Everything the reports need from one window of transactions."""

    income: TypeTotals = field(default_factory=TypeTotals)
    expense: TypeTotals = field(default_factory=TypeTotals)
    categories: list[CategoryTotals] = field(default_factory=list)

    @property
    def net_income(self) -> float:
        return round(self.income.total - self.expense.total, 2)

    @property
    def savings_rate(self) -> float:
        return savings_rate(self.income.total, self.expense.total)

    @property
    def transaction_count(self) -> int:
        return self.income.count + self.expense.count

    @property
    def has_data(self) -> bool:
        return self.transaction_count > 0

    def categories_of(self, transaction_type: str) -> list[CategoryTotals]:
        return [c for c in self.categories if c.transaction_type == transaction_type]


def _sort_key(entry: CategoryTotals) -> tuple[float, str]:
    return (-entry.total, entry.name.lower())


def fold_transactions(
    rows: Iterable[Transaction], category_names: Mapping[int, str] | None = None
) -> PeriodFold:
    """Fold transactions into per-type and per-category totals.

    Category groups are sorted by total, largest first, ties by name.
    """

    names = category_names or {}
    fold = PeriodFold()
    groups: dict[tuple[Optional[int], str], CategoryTotals] = {}

    for tx in rows:
        if tx.transaction_type not in (INCOME, EXPENSE):
            continue
        bucket = fold.income if tx.transaction_type == INCOME else fold.expense
        bucket.total += tx.amount
        bucket.count += 1

        key = (tx.category_id, tx.transaction_type)
        group = groups.get(key)
        if group is None:
            group = CategoryTotals(
                category_id=tx.category_id,
                name=names.get(tx.category_id, UNCATEGORIZED),
                transaction_type=tx.transaction_type,
            )
            groups[key] = group
        group.total += tx.amount
        group.count += 1

    fold.income.total = round(fold.income.total, 2)
    fold.expense.total = round(fold.expense.total, 2)
    for group in groups.values():
        group.total = round(group.total, 2)
    fold.categories = sorted(groups.values(), key=_sort_key)
    return fold


def bucket_by_month(
    rows: Iterable[Transaction], windows: list[PeriodWindow]
) -> dict[str, PeriodFold]:
    """Fold transactions separately for each month window, keyed ``YYYY-MM``."""

    per_month: dict[str, list[Transaction]] = {window.key: [] for window in windows}
    for tx in rows:
        key = month_key(tx.occurred_at)
        if key in per_month:
            per_month[key].append(tx)
    return {key: fold_transactions(txs) for key, txs in per_month.items()}
