"""Authentication routes."""

from __future__ import annotations

from flask import g, request

from ...errors import AuthenticationError
from ...extensions import get_services
from ...responses import created, success
from ...security import current_user, login_required
from ...serializers import user_to_dict
from ...services import auth as auth_service
from ...services.tokens import bearer_token, verify_access_token
from . import bp
from .forms import ChangePasswordForm, LoginForm, ProfileForm, RegisterForm


def _auth_payload(result: auth_service.AuthResult) -> dict:
    return {
        "user": user_to_dict(result.user),
        "token": result.token,
        "tokenType": "Bearer",
        "expiresIn": result.expires_in,
    }


@bp.post("/register")
def register():
    form = RegisterForm.from_mapping(request.get_json(silent=True))
    form.validate_or_raise()
    services = get_services()
    result = auth_service.register(
        user_repo=services.user_repo,
        config=services.config,
        first_name=form.first_name,
        last_name=form.last_name,
        email=form.email,
        password=form.password,
        currency=form.currency,
    )
    return created(_auth_payload(result), "User registered successfully")


@bp.post("/login")
def login():
    form = LoginForm.from_mapping(request.get_json(silent=True))
    form.validate_or_raise()
    services = get_services()
    result = auth_service.login(
        user_repo=services.user_repo,
        config=services.config,
        email=form.email,
        password=form.password,
    )
    return success(_auth_payload(result), "Login successful")


@bp.get("/me")
@login_required
def me():
    return success({"user": user_to_dict(current_user())}, "Profile retrieved successfully")


@bp.put("/profile")
@login_required
def update_profile():
    form = ProfileForm.from_mapping(request.get_json(silent=True), partial=True)
    form.validate_or_raise()
    user = auth_service.update_profile(
        current_user(),
        user_repo=get_services().user_repo,
        first_name=form.first_name,
        last_name=form.last_name,
        currency=form.currency,
    )
    return success({"user": user_to_dict(user)}, "Profile updated successfully")


@bp.put("/password")
@login_required
def change_password():
    form = ChangePasswordForm.from_mapping(request.get_json(silent=True))
    form.validate_or_raise()
    auth_service.change_password(
        current_user(),
        user_repo=get_services().user_repo,
        current_password=form.current_password,
        new_password=form.new_password,
    )
    return success(message="Password changed successfully")


@bp.post("/logout")
@login_required
def logout():
    # Tokens are stateless; the client discards its copy.
    return success(message="Logout successful")


@bp.get("/check")
def check():
    """Report whether the bearer token is valid without failing the request."""

    services = get_services()
    token = bearer_token(request.headers.get("Authorization"))
    if not token:
        return success({"authenticated": False}, "No token provided")
    try:
        info = verify_access_token(token, config=services.config)
    except AuthenticationError as exc:
        return success({"authenticated": False, "reason": exc.message}, "Token is invalid")
    user = services.user_repo.get_by_id(info.user_id)
    if user is None or not user.is_active:
        return success({"authenticated": False}, "Token is invalid")
    g.current_user = user
    return success(
        {"authenticated": True, "user": user_to_dict(user), "token": info.to_dict()},
        "Token is valid",
    )
