"""Bearer-token guard for API blueprints."""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar

from flask import Blueprint, g, request

from .errors import AuthenticationError
from .extensions import get_services
from .models.user import User
from .services.auth import authenticate_token
from .services.tokens import bearer_token

F = TypeVar("F", bound=Callable)


def authenticate_request() -> User:
    """Resolve the ``Authorization`` header and store the user on ``g``."""

    services = get_services()
    token = bearer_token(request.headers.get("Authorization"))
    user, info = authenticate_token(token, user_repo=services.user_repo, config=services.config)
    g.current_user = user
    g.token_info = info
    return user


def login_required(view: F) -> F:
    """Reject the request with 401/403 unless it carries a valid token."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        authenticate_request()
        return view(*args, **kwargs)

    return wrapped  # type: ignore[return-value]


def protect_blueprint(bp: Blueprint) -> None:
    """Require a valid token for every route on ``bp``."""

    @bp.before_request
    def _require_token() -> None:
        authenticate_request()


def current_user() -> User:
    user = g.get("current_user")
    if user is None:  # pragma: no cover - guarded by login_required
        raise AuthenticationError()
    return user


def current_user_id() -> int:
    return current_user().id
