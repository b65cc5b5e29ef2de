"""Model to camelCase JSON conversions."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from .models import Category, Goal, Transaction, User
from .services.goal_metrics import GoalMetrics, derive
from .services.presentation import category_color, category_icon


def user_to_dict(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "fullName": user.full_name,
        "email": user.email,
        "currency": user.currency,
        "isActive": user.is_active,
        "lastLogin": user.last_login,
        "createdAt": user.created_at,
        "updatedAt": user.updated_at,
    }


def category_to_dict(category: Category, *, usage_count: Optional[int] = None) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": category.id,
        "name": category.name,
        "type": category.category_type,
        "color": category.color or category_color(category.name, category.category_type),
        "icon": category.icon or category_icon(category.name),
        "description": category.description,
        "isDefault": category.is_default,
        "isActive": category.is_active,
        "userId": category.user_id,
        "createdAt": category.created_at,
        "updatedAt": category.updated_at,
    }
    if usage_count is not None:
        payload["transactionCount"] = usage_count
    return payload


def category_ref(category: Optional[Category]) -> Optional[dict[str, Any]]:
    """Compact category reference embedded in transaction payloads."""

    if category is None:
        return None
    return {
        "id": category.id,
        "name": category.name,
        "type": category.category_type,
        "color": category.color or category_color(category.name, category.category_type),
        "icon": category.icon or category_icon(category.name),
    }


def transaction_to_dict(
    transaction: Transaction, category: Optional[Category] = None
) -> dict[str, Any]:
    return {
        "id": transaction.id,
        "type": transaction.transaction_type,
        "amount": transaction.amount,
        "description": transaction.description,
        "notes": transaction.notes,
        "date": transaction.occurred_at,
        "currency": transaction.currency,
        "categoryId": transaction.category_id,
        "categoryName": category.name if category else "Uncategorized",
        "category": category_ref(category),
        "createdAt": transaction.created_at,
        "updatedAt": transaction.updated_at,
    }


def goal_metrics_to_dict(metrics: GoalMetrics) -> dict[str, Any]:
    return {
        "progress": metrics.progress,
        "progressPercentage": metrics.progress_percentage,
        "remainingAmount": metrics.remaining_amount,
        "isCompleted": metrics.is_completed,
        "isOverdue": metrics.is_overdue,
        "daysRemaining": metrics.days_remaining,
        "duration": metrics.duration,
        "requiredMonthlyAmount": metrics.required_monthly_amount,
    }


def goal_to_dict(
    goal: Goal, metrics: Optional[GoalMetrics] = None, *, now: Optional[datetime] = None
) -> dict[str, Any]:
    metrics = metrics or derive(goal, now)
    return {
        "id": goal.id,
        "title": goal.title,
        "description": goal.description,
        "targetAmount": goal.target_amount,
        "currentAmount": goal.current_amount,
        "startDate": goal.start_date,
        "endDate": goal.end_date,
        "status": goal.status,
        "priority": goal.priority,
        "category": goal.category,
        "currency": goal.currency,
        "completedAt": goal.completed_at,
        "createdAt": goal.created_at,
        "updatedAt": goal.updated_at,
        **goal_metrics_to_dict(metrics),
    }
