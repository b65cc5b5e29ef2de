"""Category management: system defaults plus user-defined buckets."""

from __future__ import annotations

from typing import Any, Optional

from ..constants.categories import DEFAULT_CATEGORIES
from ..constants.finance import CATEGORY_TYPES
from ..domain.repositories.category import CategoryRepository
from ..errors import AuthorizationError, ConflictError, NotFoundError
from ..logging_config import get_logger
from ..models.category import Category

logger = get_logger(__name__)

DEFAULT_COLOR = "#607D8B"
DEFAULT_ICON = "folder"


def ensure_default_categories(category_repo: CategoryRepository) -> int:
    """Seed the global default categories that are missing; returns how many were created."""

    existing = {(c.name.lower(), c.category_type) for c in category_repo.list_defaults()}
    created = 0
    for default in DEFAULT_CATEGORIES:
        if (default.name.lower(), default.category_type) in existing:
            continue
        category_repo.create(
            Category(
                user_id=None,
                name=default.name,
                category_type=default.category_type,
                color=default.color,
                icon=default.icon,
                is_default=True,
                is_active=True,
            )
        )
        created += 1
    if created:
        logger.info("Default categories seeded", extra={"created_count": created})
    return created


def get_category(
    category_repo: CategoryRepository, category_id: int, *, user_id: int
) -> Category:
    category = category_repo.get_by_id(category_id, user_id=user_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


def _get_owned(category_repo: CategoryRepository, category_id: int, *, user_id: int, action: str):
    category = get_category(category_repo, category_id, user_id=user_id)
    if category.is_default or category.user_id is None:
        raise AuthorizationError(f"Default categories cannot be {action}")
    if category.user_id != user_id:
        raise AuthorizationError("Access denied")
    return category


def list_categories(
    category_repo: CategoryRepository,
    *,
    user_id: int,
    category_type: Optional[str] = None,
    include_inactive: bool = False,
) -> list[Category]:
    return category_repo.list_for_user(
        user_id=user_id, category_type=category_type, include_inactive=include_inactive
    )


def usage_counts(category_repo: CategoryRepository, *, user_id: int) -> dict[int, int]:
    return {u.category_id: u.transaction_count for u in category_repo.usage_stats(user_id=user_id)}


def search_categories(
    category_repo: CategoryRepository,
    term: str,
    *,
    user_id: int,
    category_type: Optional[str] = None,
) -> list[Category]:
    return category_repo.search(term, user_id=user_id, category_type=category_type)


def create_category(
    category_repo: CategoryRepository,
    *,
    user_id: int,
    name: str,
    category_type: str,
    color: Optional[str] = None,
    icon: Optional[str] = None,
    description: Optional[str] = None,
) -> Category:
    """Create a user category; (name, type) must be unique among the user's own."""

    name = name.strip()
    if category_repo.find_duplicate(name, category_type, user_id=user_id) is not None:
        raise ConflictError("A category with this name and type already exists")

    category = category_repo.create(
        Category(
            user_id=user_id,
            name=name,
            category_type=category_type,
            color=color or DEFAULT_COLOR,
            icon=icon or DEFAULT_ICON,
            description=description,
            is_default=False,
            is_active=True,
        )
    )
    logger.info(
        "Category created",
        extra={"user_id": user_id, "category_id": category.id, "type": category_type},
    )
    return category


def update_category(
    category_repo: CategoryRepository,
    category_id: int,
    *,
    user_id: int,
    changes: dict[str, Any],
) -> Category:
    """Apply partial changes. The type is never part of ``changes``."""

    category = _get_owned(category_repo, category_id, user_id=user_id, action="modified")

    new_name = changes.get("name")
    if new_name and new_name.strip().lower() != category.name.lower():
        duplicate = category_repo.find_duplicate(
            new_name, category.category_type, user_id=user_id
        )
        if duplicate is not None and duplicate.id != category.id:
            raise ConflictError("A category with this name and type already exists")
        category.name = new_name.strip()

    for key in ("color", "icon", "description", "is_active"):
        if key in changes:
            setattr(category, key, changes[key])

    category = category_repo.update(category)
    logger.info("Category updated", extra={"user_id": user_id, "category_id": category_id})
    return category


def delete_category(category_repo: CategoryRepository, category_id: int, *, user_id: int) -> None:
    """Soft-delete a user category that no live transaction references."""

    _get_owned(category_repo, category_id, user_id=user_id, action="deleted")
    in_use = category_repo.count_transactions(category_id, user_id=user_id)
    if in_use:
        raise ConflictError(
            f"Cannot delete category. It is used by {in_use} transaction(s)"
        )
    category_repo.soft_delete(category_id, user_id=user_id)
    logger.info("Category deleted", extra={"user_id": user_id, "category_id": category_id})


def set_category_active(
    category_repo: CategoryRepository, category_id: int, *, user_id: int, active: bool
) -> Category:
    action = "reactivated" if active else "deactivated"
    category = _get_owned(category_repo, category_id, user_id=user_id, action=action)
    category.is_active = active
    category = category_repo.update(category)
    logger.info(
        "Category %s", action, extra={"user_id": user_id, "category_id": category_id}
    )
    return category


def category_stats(category_repo: CategoryRepository, *, user_id: int) -> dict[str, Any]:
    """Counts by type (user-created vs default) and per-category usage."""

    categories = category_repo.list_for_user(user_id=user_id, include_inactive=True)
    usage = {u.category_id: u for u in category_repo.usage_stats(user_id=user_id)}

    by_type: dict[str, dict[str, int]] = {
        category_type: {"total": 0, "userCreated": 0, "default": 0, "active": 0}
        for category_type in CATEGORY_TYPES
    }
    most_used = []
    for category in categories:
        bucket = by_type.setdefault(
            category.category_type, {"total": 0, "userCreated": 0, "default": 0, "active": 0}
        )
        bucket["total"] += 1
        bucket["default" if category.is_default else "userCreated"] += 1
        if category.is_active:
            bucket["active"] += 1
        entry = usage.get(category.id)
        if entry and entry.transaction_count:
            most_used.append(
                {
                    "categoryId": category.id,
                    "name": category.name,
                    "type": category.category_type,
                    "transactionCount": entry.transaction_count,
                    "totalAmount": round(entry.total_amount, 2),
                }
            )

    most_used.sort(key=lambda item: (-item["transactionCount"], item["name"]))
    return {
        **by_type,
        "totalCategories": len(categories),
        "usage": most_used,
    }
