"""Authentication form validation helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from ...constants.finance import CURRENCIES, ValidationLimits
from ...validation import FormBase

_NAME_PATTERN = re.compile(r"^[A-Za-z\s'-]+$")
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_PASSWORD_RULES = (
    re.compile(r"[a-z]"),
    re.compile(r"[A-Z]"),
    re.compile(r"\d"),
    re.compile(r"[^A-Za-z0-9]"),
)
PASSWORD_MAX_LENGTH = 128
EMAIL_MAX_LENGTH = 255


class _AuthFormMixin:
    def _name(self: FormBase, key: str, label: str) -> str:
        text = self._required_text(
            key,
            label,
            min_length=ValidationLimits.NAME_MIN_LENGTH,
            max_length=ValidationLimits.NAME_MAX_LENGTH,
        )
        if text and not self.errors.get(key) and not _NAME_PATTERN.match(text):
            self._add_error(
                key, f"{label} can only contain letters, spaces, hyphens, and apostrophes"
            )
        return text

    def _email(self: FormBase, key: str = "email") -> str:
        text = self._text(key).lower()
        if not text:
            self._add_error(key, "Email is required")
        elif len(text) > EMAIL_MAX_LENGTH:
            self._add_error(key, f"Email cannot exceed {EMAIL_MAX_LENGTH} characters")
        elif not _EMAIL_PATTERN.match(text):
            self._add_error(key, "Please provide a valid email address")
        return text

    def _strong_password(self: FormBase, key: str, label: str) -> str:
        raw = self.raw_data.get(key)
        password = raw if isinstance(raw, str) else ""
        if not password:
            self._add_error(key, f"{label} is required")
            return password
        if not ValidationLimits.PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
            self._add_error(
                key,
                f"{label} must be between {ValidationLimits.PASSWORD_MIN_LENGTH} "
                f"and {PASSWORD_MAX_LENGTH} characters",
            )
        if not all(rule.search(password) for rule in _PASSWORD_RULES):
            self._add_error(
                key,
                f"{label} must contain at least one uppercase letter, one lowercase letter, "
                "one number, and one special character",
            )
        return password


@dataclass
class RegisterForm(_AuthFormMixin, FormBase):
    """Sign-up payload."""

    fields = ("firstName", "lastName", "email", "password", "currency")

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    password: str = ""
    currency: Optional[str] = None

    def validate(self) -> bool:
        self.errors.clear()
        self.first_name = self._name("firstName", "First name")
        self.last_name = self._name("lastName", "Last name")
        self.email = self._email()
        self.password = self._strong_password("password", "Password")
        if self.provided("currency"):
            self.currency = self._choice("currency", "Currency", CURRENCIES)
        return not self.errors


@dataclass
class LoginForm(_AuthFormMixin, FormBase):
    fields = ("email", "password")

    email: str = ""
    password: str = ""

    def validate(self) -> bool:
        self.errors.clear()
        self.email = self._email()
        raw = self.raw_data.get("password")
        self.password = raw if isinstance(raw, str) else ""
        if not self.password:
            self._add_error("password", "Password is required")
        return not self.errors


@dataclass
class ProfileForm(_AuthFormMixin, FormBase):
    """Profile update; email and password are rejected here."""

    fields = ("firstName", "lastName", "currency", "email", "password")

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    currency: Optional[str] = None

    def validate(self) -> bool:
        self.errors.clear()
        if self.provided("firstName"):
            self.first_name = self._name("firstName", "First name")
        if self.provided("lastName"):
            self.last_name = self._name("lastName", "Last name")
        if self.provided("currency"):
            self.currency = self._choice("currency", "Currency", CURRENCIES)
        if self.provided("email"):
            self._add_error("email", "Email cannot be updated through this endpoint")
        if self.provided("password"):
            self._add_error("password", "Password cannot be updated through this endpoint")
        return not self.errors


@dataclass
class ChangePasswordForm(_AuthFormMixin, FormBase):
    fields = ("currentPassword", "newPassword")

    current_password: str = ""
    new_password: str = ""

    def validate(self) -> bool:
        self.errors.clear()
        raw = self.raw_data.get("currentPassword")
        self.current_password = raw if isinstance(raw, str) else ""
        if not self.current_password:
            self._add_error("currentPassword", "Current password is required")
        self.new_password = self._strong_password("newPassword", "New password")
        return not self.errors
