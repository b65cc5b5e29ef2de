"""Clock and calendar helpers shared by models and services."""

from __future__ import annotations

from datetime import date, datetime, timezone

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime.

    SQLite drops tzinfo on round-trip, so every stored timestamp is naive UTC.
    """

    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def month_start(year: int, month: int) -> datetime:
    return datetime(year, month, 1)


def add_months(year: int, month: int, delta: int) -> tuple[int, int]:
    """Shift a (year, month) pair by ``delta`` months."""

    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def next_month_start(year: int, month: int) -> datetime:
    next_year, next_month = add_months(year, month, 1)
    return datetime(next_year, next_month, 1)


def shift_years(value: date | datetime, years: int):
    """Move a date by whole years, clamping Feb 29 to Feb 28."""

    try:
        return value.replace(year=value.year + years)
    except ValueError:
        return value.replace(year=value.year + years, day=28)


def month_key(value: date | datetime) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def month_label(year: int, month: int) -> str:
    return f"{MONTH_NAMES[month - 1][:3]} {year}"


def month_name(month: int) -> str:
    if 1 <= month <= 12:
        return MONTH_NAMES[month - 1]
    return "Unknown"
