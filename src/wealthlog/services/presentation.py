"""Colours, icons and human-readable text for chart payloads."""

from __future__ import annotations

import math
from typing import Optional, Sequence

from ..constants.finance import INCOME

DEFAULT_PALETTE = (
    "#8884d8", "#82ca9d", "#ffc658", "#ff7c7c", "#8dd1e1",
    "#d084d0", "#ffb347", "#87ceeb", "#dda0dd", "#98fb98",
)
INCOME_PALETTE = ("#4CAF50", "#8BC34A", "#CDDC39", "#FFC107", "#FF9800")
EXPENSE_PALETTE = (
    "#F44336", "#E91E63", "#9C27B0", "#673AB7", "#3F51B5",
    "#2196F3", "#00BCD4", "#009688", "#795548", "#607D8B",
)

DEFAULT_ICON = "pie-chart"
# First keyword contained in the lower-cased category name wins.
ICON_KEYWORDS = (
    ("salary", "briefcase"),
    ("freelance", "laptop"),
    ("business", "store"),
    ("investment", "trending-up"),
    ("food", "utensils"),
    ("groceries", "shopping-cart"),
    ("transport", "car"),
    ("gas", "fuel"),
    ("entertainment", "film"),
    ("shopping", "shopping-bag"),
    ("clothing", "shirt"),
    ("utilities", "zap"),
    ("healthcare", "heart"),
    ("fitness", "activity"),
    ("education", "book"),
    ("travel", "map-pin"),
    ("rent", "home"),
    ("insurance", "shield"),
    ("subscriptions", "smartphone"),
)

STATUS_LABELS = {
    "active": "Active",
    "completed": "Completed",
    "paused": "Paused",
    "cancelled": "Cancelled",
}
PRIORITY_LABELS = {
    "high": "High priority",
    "medium": "Medium priority",
    "low": "Low priority",
}

OVERDUE_COLOR = "#f44336"
_PROGRESS_COLORS = (
    (100, "#4caf50"),
    (75, "#8bc34a"),
    (50, "#ffc107"),
    (25, "#ff9800"),
)


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def name_hash(name: str) -> int:
    """Stable string hash; the same name always maps to the same colour."""

    result = 0
    for char in name:
        result = ord(char) + (_int32(_int32(result) << 5) - result)
    return result


def pick_color(name: str, palette: Sequence[str] = DEFAULT_PALETTE) -> str:
    return palette[abs(name_hash(name)) % len(palette)]


def category_color(name: str, category_type: Optional[str] = None) -> str:
    """Fallback colour for a category without one of its own."""

    if category_type is None:
        return pick_color(name)
    palette = INCOME_PALETTE if category_type == INCOME else EXPENSE_PALETTE
    return pick_color(name, palette)


def category_icon(name: str) -> str:
    lowered = name.lower()
    for keyword, icon in ICON_KEYWORDS:
        if keyword in lowered:
            return icon
    return DEFAULT_ICON


def progress_color(progress: float, is_overdue: bool) -> str:
    if is_overdue:
        return OVERDUE_COLOR
    for threshold, color in _PROGRESS_COLORS:
        if progress >= threshold:
            return color
    return OVERDUE_COLOR


def format_amount(value: float) -> str:
    """Thousands separators, at most two decimals, no trailing zeros."""

    text = f"{value:,.2f}"
    return text.rstrip("0").rstrip(".") if "." in text else text


def progress_text(
    *,
    is_completed: bool,
    progress_percentage: int,
    current_amount: float,
    target_amount: float,
    currency: str,
) -> str:
    if is_completed:
        return "Completed!"
    return (
        f"{progress_percentage}% "
        f"({format_amount(current_amount)} / {format_amount(target_amount)} {currency})"
    )


def timeline_text(
    *, is_completed: bool, is_overdue: bool, days_remaining: Optional[int]
) -> str:
    if is_completed:
        return "Goal achieved"
    if is_overdue:
        return "Overdue"
    if days_remaining is None:
        return "No deadline"
    if days_remaining == 0:
        return "Due today"
    if days_remaining == 1:
        return "1 day remaining"
    if days_remaining <= 30:
        return f"{days_remaining} days remaining"
    months = math.ceil(days_remaining / 30)
    return f"{months} month{'s' if months > 1 else ''} remaining"
