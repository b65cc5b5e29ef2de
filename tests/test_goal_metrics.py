"""Tests for derived goal figures."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from wealthlog.models import Goal
from wealthlog.services import goal_metrics

NOW = datetime(2024, 6, 15, 12, 0)


def _goal(**overrides) -> Goal:
    values = {
        "user_id": 1,
        "title": "Emergency Fund",
        "target_amount": 10000.0,
        "current_amount": 2500.0,
        "start_date": datetime(2024, 1, 1),
        "status": "active",
    }
    values.update(overrides)
    return Goal(**values)


def test_quarter_funded_goal():
    metrics = goal_metrics.derive(_goal(), NOW)
    assert metrics.progress_percentage == 25
    assert metrics.remaining_amount == 7500
    assert metrics.is_completed is False
    assert metrics.days_remaining is None
    assert metrics.required_monthly_amount == 7500


@pytest.mark.parametrize(
    ("current", "target", "expected"),
    [(0, 100, 0.0), (50, 100, 50.0), (150, 100, 100.0), (-5, 100, 0.0), (10, 0, 0.0)],
)
def test_progress_is_clamped(current, target, expected):
    value = goal_metrics.progress(current, target)
    assert 0 <= value <= 100
    assert value == pytest.approx(expected)


def test_overdue_when_past_end_and_not_completed():
    metrics = goal_metrics.derive(_goal(end_date=NOW - timedelta(days=3)), NOW)
    assert metrics.is_overdue is True
    assert metrics.days_remaining == 0


def test_completed_goal_is_never_overdue():
    goal = _goal(current_amount=10000.0, end_date=NOW - timedelta(days=3))
    metrics = goal_metrics.derive(goal, NOW)
    assert metrics.is_completed is True
    assert metrics.is_overdue is False


def test_days_remaining_rounds_up_partial_days():
    metrics = goal_metrics.derive(_goal(end_date=NOW + timedelta(days=2, hours=1)), NOW)
    assert metrics.days_remaining == 3


def test_required_monthly_amount_spreads_remaining():
    metrics = goal_metrics.derive(_goal(end_date=NOW + timedelta(days=60)), NOW)
    assert metrics.required_monthly_amount == pytest.approx(3750.0)


def test_duration_in_days():
    goal = _goal(start_date=datetime(2024, 1, 1), end_date=datetime(2024, 1, 31))
    assert goal_metrics.derive(goal, NOW).duration == 30


def test_paused_goal_cannot_take_progress():
    assert goal_metrics.can_update_amount(_goal()) is True
    assert goal_metrics.can_update_amount(_goal(status="paused")) is False
    assert goal_metrics.can_update_amount(_goal(current_amount=10000.0)) is False
