"""Category routes."""

from __future__ import annotations

from flask import request

from ...constants.finance import CATEGORY_TYPES
from ...extensions import get_services
from ...responses import created, listing, success
from ...security import current_user_id
from ...serializers import category_to_dict
from ...services import categories as category_service
from ...validation import query_bool, query_choice, query_text
from . import bp
from .forms import CategoryForm


@bp.get("")
def list_categories():
    repo = get_services().category_repo
    user_id = current_user_id()
    category_type = query_choice(request.args, "type", CATEGORY_TYPES)
    include_inactive = query_bool(request.args, "includeInactive")
    include_usage = query_bool(request.args, "includeUsage")

    rows = category_service.list_categories(
        repo, user_id=user_id, category_type=category_type, include_inactive=include_inactive
    )
    usage = category_service.usage_counts(repo, user_id=user_id) if include_usage else None
    items = [
        category_to_dict(c, usage_count=usage.get(c.id, 0) if usage is not None else None)
        for c in rows
    ]
    return listing(items, "Categories retrieved successfully")


@bp.get("/search")
def search_categories():
    term = query_text(request.args, "q", required=True)
    category_type = query_choice(request.args, "type", CATEGORY_TYPES)
    rows = category_service.search_categories(
        get_services().category_repo, term, user_id=current_user_id(), category_type=category_type
    )
    return listing([category_to_dict(c) for c in rows], "Categories search completed")


@bp.get("/stats")
def category_stats():
    stats = category_service.category_stats(
        get_services().category_repo, user_id=current_user_id()
    )
    return success(stats, "Category statistics retrieved successfully")


@bp.post("/defaults")
def ensure_defaults():
    repo = get_services().category_repo
    created_count = category_service.ensure_default_categories(repo)
    defaults = [category_to_dict(c) for c in repo.list_defaults()]
    return success(
        {"created": created_count, "categories": defaults},
        "Default categories are available",
    )


@bp.get("/<int:category_id>")
def get_category(category_id: int):
    category = category_service.get_category(
        get_services().category_repo, category_id, user_id=current_user_id()
    )
    return success(category_to_dict(category), "Category retrieved successfully")


@bp.post("")
def create_category():
    form = CategoryForm.from_mapping(request.get_json(silent=True))
    form.validate_or_raise()
    category = category_service.create_category(
        get_services().category_repo,
        user_id=current_user_id(),
        name=form.name,
        category_type=form.category_type,
        color=form.color,
        icon=form.icon,
        description=form.description,
    )
    return created(category_to_dict(category), "Category created successfully")


@bp.put("/<int:category_id>")
def update_category(category_id: int):
    form = CategoryForm.from_mapping(request.get_json(silent=True), partial=True)
    form.validate_or_raise()
    category = category_service.update_category(
        get_services().category_repo,
        category_id,
        user_id=current_user_id(),
        changes=form.changes(),
    )
    return success(category_to_dict(category), "Category updated successfully")


@bp.delete("/<int:category_id>")
def delete_category(category_id: int):
    category_service.delete_category(
        get_services().category_repo, category_id, user_id=current_user_id()
    )
    return success(message="Category deleted successfully")


@bp.patch("/<int:category_id>/deactivate")
def deactivate_category(category_id: int):
    category = category_service.set_category_active(
        get_services().category_repo, category_id, user_id=current_user_id(), active=False
    )
    return success(category_to_dict(category), "Category deactivated successfully")


@bp.patch("/<int:category_id>/reactivate")
def reactivate_category(category_id: int):
    category = category_service.set_category_active(
        get_services().category_repo, category_id, user_id=current_user_id(), active=True
    )
    return success(category_to_dict(category), "Category reactivated successfully")
