"""Tests for chart colours, icons and display text."""

from __future__ import annotations

from wealthlog.services import presentation


def test_name_hash_is_stable():
    assert presentation.name_hash("Food") == presentation.name_hash("Food")
    assert presentation.name_hash("") == 0
    assert presentation.name_hash("a") == 97


def test_colour_comes_from_palette():
    color = presentation.category_color("Groceries", "expense")
    assert color in presentation.EXPENSE_PALETTE
    assert presentation.category_color("Salary", "income") in presentation.INCOME_PALETTE
    assert presentation.category_color("Misc") in presentation.DEFAULT_PALETTE
    assert presentation.category_color("Groceries", "expense") == color


def test_icon_keywords():
    assert presentation.category_icon("Food & Dining") == "utensils"
    assert presentation.category_icon("Monthly Salary") == "briefcase"
    assert presentation.category_icon("Something else") == presentation.DEFAULT_ICON


def test_progress_colour_thresholds():
    assert presentation.progress_color(100, False) == "#4caf50"
    assert presentation.progress_color(80, False) == "#8bc34a"
    assert presentation.progress_color(55, False) == "#ffc107"
    assert presentation.progress_color(30, False) == "#ff9800"
    assert presentation.progress_color(10, False) == presentation.OVERDUE_COLOR
    assert presentation.progress_color(90, True) == presentation.OVERDUE_COLOR


def test_progress_text():
    text = presentation.progress_text(
        is_completed=False,
        progress_percentage=25,
        current_amount=2500,
        target_amount=10000,
        currency="ETB",
    )
    assert text == "25% (2,500 / 10,000 ETB)"
    done = presentation.progress_text(
        is_completed=True,
        progress_percentage=100,
        current_amount=1,
        target_amount=1,
        currency="ETB",
    )
    assert done == "Completed!"


def test_timeline_text():
    def text(days, *, completed=False, overdue=False):
        return presentation.timeline_text(
            is_completed=completed, is_overdue=overdue, days_remaining=days
        )

    assert text(None) == "No deadline"
    assert text(0) == "Due today"
    assert text(1) == "1 day remaining"
    assert text(12) == "12 days remaining"
    assert text(31) == "2 months remaining"
    assert text(5, overdue=True) == "Overdue"
    assert text(5, completed=True) == "Goal achieved"


def test_format_amount_trims_zeros():
    assert presentation.format_amount(1234.5) == "1,234.5"
    assert presentation.format_amount(1000) == "1,000"
    assert presentation.format_amount(0.25) == "0.25"
