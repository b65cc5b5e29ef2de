"""Tests for the goal lifecycle."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from wealthlog.errors import NotFoundError, ValidationError
from wealthlog.services import goals as service

NOW = datetime(2024, 6, 15, 12, 0)


def _create(goal_repo, user, **overrides):
    values = {"user_id": user.id, "title": "Emergency Fund", "target_amount": 10000.0, "now": NOW}
    values.update(overrides)
    return service.create_goal(goal_repo, **values)


def test_new_goal_starts_active(goal_repo, user):
    goal = _create(goal_repo, user, current_amount=2500)
    assert goal.status == "active"
    assert goal.completed_at is None
    assert goal.start_date == NOW


def test_funded_goal_completes_on_creation(goal_repo, user):
    goal = _create(goal_repo, user, current_amount=10000)
    assert goal.status == "completed"
    assert goal.completed_at == NOW


def test_create_enforces_bounds(goal_repo, user):
    with pytest.raises(ValidationError) as excinfo:
        _create(goal_repo, user, current_amount=20000)
    assert excinfo.value.status_code == 422
    with pytest.raises(ValidationError):
        _create(goal_repo, user, start_date=NOW, end_date=NOW - timedelta(days=1))


def test_update_checks_merged_record(goal_repo, user):
    goal = _create(goal_repo, user, current_amount=5000)
    with pytest.raises(ValidationError):
        service.update_goal(
            goal_repo, goal.id, user_id=user.id, changes={"target_amount": 4000}, now=NOW
        )
    updated = service.update_goal(
        goal_repo, goal.id, user_id=user.id, changes={"current_amount": 10000}, now=NOW
    )
    assert updated.status == "completed"
    assert updated.completed_at == NOW


def test_completion_is_idempotent(goal_repo, user):
    goal = _create(goal_repo, user)
    first = service.update_progress(goal_repo, goal.id, 10000, user_id=user.id, now=NOW)
    assert first.completed_at == NOW

    later = NOW + timedelta(days=2)
    again = service.update_goal(
        goal_repo, goal.id, user_id=user.id, changes={"title": "Rainy Day"}, now=later
    )
    assert again.status == "completed"
    assert again.completed_at == NOW
    assert service.mark_completed_if_reached(again, later) is False
    assert again.completed_at == NOW


def test_progress_is_capped_at_target(goal_repo, user):
    goal = _create(goal_repo, user, target_amount=1000)
    goal = service.add_progress(goal_repo, goal.id, 400, user_id=user.id, now=NOW)
    assert goal.current_amount == 400
    goal = service.add_progress(goal_repo, goal.id, 900, user_id=user.id, now=NOW)
    assert goal.current_amount == 1000
    assert goal.status == "completed"


def test_progress_rules(goal_repo, user):
    goal = _create(goal_repo, user)
    with pytest.raises(ValidationError):
        service.add_progress(goal_repo, goal.id, 0, user_id=user.id, now=NOW)
    with pytest.raises(ValidationError):
        service.update_progress(goal_repo, goal.id, -1, user_id=user.id, now=NOW)
    service.pause_goal(goal_repo, goal.id, user_id=user.id)
    with pytest.raises(ValidationError, match="inactive goal"):
        service.add_progress(goal_repo, goal.id, 10, user_id=user.id, now=NOW)


def test_status_transitions(goal_repo, user):
    goal = _create(goal_repo, user)
    with pytest.raises(ValidationError, match="Only paused goals"):
        service.resume_goal(goal_repo, goal.id, user_id=user.id)
    assert service.pause_goal(goal_repo, goal.id, user_id=user.id).status == "paused"
    with pytest.raises(ValidationError, match="Only active goals"):
        service.pause_goal(goal_repo, goal.id, user_id=user.id)
    assert service.resume_goal(goal_repo, goal.id, user_id=user.id).status == "active"

    completed = service.complete_goal(goal_repo, goal.id, user_id=user.id, now=NOW)
    assert completed.status == "completed"
    assert completed.completed_at == NOW
    with pytest.raises(ValidationError, match="already completed"):
        service.complete_goal(goal_repo, goal.id, user_id=user.id, now=NOW)


def test_delete_restore_and_listing(goal_repo, user):
    first = _create(goal_repo, user, title="Car")
    _create(goal_repo, user, title="Trip")
    service.delete_goal(goal_repo, first.id, user_id=user.id)
    with pytest.raises(NotFoundError):
        service.get_goal(goal_repo, first.id, user_id=user.id)
    goals, total = service.list_goals(goal_repo, user_id=user.id, status="all", page=1, limit=10)
    assert total == 1
    service.restore_goal(goal_repo, first.id, user_id=user.id)
    with pytest.raises(NotFoundError):
        service.restore_goal(goal_repo, first.id, user_id=user.id)
    _, total = service.list_goals(goal_repo, user_id=user.id)
    assert total == 2


def test_overdue_goals(goal_repo, goal_factory, user):
    goal_factory(title="Late", end_date=NOW - timedelta(days=5))
    goal_factory(title="Fine", end_date=NOW + timedelta(days=5))
    assert [g.title for g in service.overdue_goals(goal_repo, user_id=user.id, now=NOW)] == ["Late"]


def test_summary_per_status(goal_repo, goal_factory, user):
    goal_factory(target_amount=1000, current_amount=250)
    goal_factory(target_amount=1000, current_amount=1000, status="completed")
    goal_factory(target_amount=2000, current_amount=0, status="paused")

    summary = service.goal_summary(goal_repo, user_id=user.id)
    assert summary["total"] == 3
    assert summary["active"] == {"count": 1, "totalTarget": 1000, "totalCurrent": 250}
    assert summary["completed"]["count"] == 1
    assert summary["cancelled"]["count"] == 0
    assert summary["overallProgressPercentage"] == 31
