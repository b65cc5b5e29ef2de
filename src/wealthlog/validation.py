"""Shared parsing helpers for request forms and query strings."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar, Iterable, Optional

from .errors import ValidationError
from .timeutils import to_naive_utc

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def parse_datetime(raw: Any) -> datetime:
    """Parse ``YYYY-MM-DD`` or an ISO-8601 timestamp into naive UTC.

    Raises:
        ValueError: when the value is not a recognisable date
    """

    if isinstance(raw, datetime):
        return to_naive_utc(raw)
    text = str(raw).strip()
    if len(text) == 10:
        return datetime.strptime(text, "%Y-%m-%d")
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return to_naive_utc(datetime.fromisoformat(text))


def parse_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def decimal_places(value: float) -> int:
    exponent = Decimal(str(value)).normalize().as_tuple().exponent
    return -exponent if isinstance(exponent, int) and exponent < 0 else 0


@dataclass
class FormBase:
    """Collects raw request data and per-field error messages.

    Subclasses list their accepted keys in ``fields`` and implement
    ``validate``. In ``partial`` mode only keys present in the payload are
    checked, which is how update endpoints work.
    """

    fields: ClassVar[tuple[str, ...]] = ()
    partial: bool = field(default=False, init=False)
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]], *, partial: bool = False):
        """Create a form populated from request data."""

        form = cls()
        form.partial = partial
        form.load(data or {})
        return form

    def load(self, data: Mapping[str, Any]) -> None:
        """Bind incoming mapping data to the form state."""

        self.raw_data = {key: data[key] for key in self.fields if key in data}

    def validate(self) -> bool:  # pragma: no cover - interface
        raise NotImplementedError

    def validate_or_raise(self) -> None:
        if not self.validate():
            raise ValidationError.from_field_errors(self.errors)

    def provided(self, key: str) -> bool:
        return key in self.raw_data

    def should_check(self, key: str) -> bool:
        return not self.partial or self.provided(key)

    def _add_error(self, field_name: str, message: str) -> None:
        """Accumulate validation errors for a specific field."""

        self.errors.setdefault(field_name, []).append(message)

    def _text(self, key: str) -> str:
        value = self.raw_data.get(key)
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else str(value).strip()

    def _optional_text(self, key: str, label: str, max_length: int) -> Optional[str]:
        text = self._text(key)
        if len(text) > max_length:
            self._add_error(key, f"{label} cannot exceed {max_length} characters")
        return text or None

    def _required_text(
        self, key: str, label: str, *, min_length: int = 1, max_length: int
    ) -> str:
        text = self._text(key)
        if not text:
            self._add_error(key, f"{label} is required")
        elif not min_length <= len(text) <= max_length:
            self._add_error(
                key, f"{label} must be between {min_length} and {max_length} characters"
            )
        return text

    def _choice(
        self, key: str, label: str, choices: Iterable[str], *, default: Optional[str] = None
    ) -> Optional[str]:
        options = tuple(choices)
        text = self._text(key)
        if not text:
            if default is None:
                self._add_error(key, f"{label} is required")
            return default
        normalized = text.lower() if all(c.islower() for c in options) else text.upper()
        if normalized not in options:
            self._add_error(key, f"{label} must be one of: {', '.join(options)}")
            return None
        return normalized

    def _number(self, key: str, label: str, *, required: bool = True) -> Optional[float]:
        raw = self.raw_data.get(key)
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            if required:
                self._add_error(key, f"{label} is required")
            return None
        if isinstance(raw, bool):
            self._add_error(key, f"{label} must be a number")
            return None
        try:
            value = float(raw)
        except (TypeError, ValueError):
            self._add_error(key, f"{label} must be a number")
            return None
        if not math.isfinite(value):
            self._add_error(key, f"{label} must be a number")
            return None
        return value

    def _date(self, key: str, label: str, *, required: bool = True) -> Optional[datetime]:
        raw = self.raw_data.get(key)
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            if required:
                self._add_error(key, f"{label} is required")
            return None
        try:
            return parse_datetime(raw)
        except (TypeError, ValueError):
            self._add_error(key, f"{label} must be a valid date")
            return None

    def _bool(self, key: str, label: str, *, default: bool) -> bool:
        if not self.provided(key):
            return default
        try:
            return parse_bool(self.raw_data[key])
        except ValueError:
            self._add_error(key, f"{label} must be a boolean value")
            return default


def query_int(
    args: Mapping[str, Any],
    name: str,
    *,
    default: Optional[int] = None,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> Optional[int]:
    """Read an integer query parameter, raising ``ValidationError`` when out of range."""

    raw = args.get(name)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        value = int(str(raw).strip())
    except ValueError as exc:
        raise ValidationError.for_field(name, f"{name} must be an integer") from exc
    if minimum is not None and value < minimum:
        raise ValidationError.for_field(name, f"{name} must be at least {minimum}")
    if maximum is not None and value > maximum:
        raise ValidationError.for_field(name, f"{name} must be at most {maximum}")
    return value


def query_float(args: Mapping[str, Any], name: str) -> Optional[float]:
    raw = args.get(name)
    if raw is None or str(raw).strip() == "":
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValidationError.for_field(name, f"{name} must be a number") from exc
    if not math.isfinite(value):
        raise ValidationError.for_field(name, f"{name} must be a number")
    return value


def query_bool(args: Mapping[str, Any], name: str, *, default: bool = False) -> bool:
    raw = args.get(name)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        return parse_bool(raw)
    except ValueError as exc:
        raise ValidationError.for_field(name, f"{name} must be a boolean value") from exc


def query_date(args: Mapping[str, Any], name: str) -> Optional[datetime]:
    raw = args.get(name)
    if raw is None or str(raw).strip() == "":
        return None
    try:
        return parse_datetime(raw)
    except ValueError as exc:
        raise ValidationError.for_field(name, f"{name} must be a valid date") from exc


def query_choice(
    args: Mapping[str, Any], name: str, choices: Iterable[str], *, default: Optional[str] = None
) -> Optional[str]:
    raw = args.get(name)
    if raw is None or str(raw).strip() == "":
        return default
    value = str(raw).strip().lower()
    options = tuple(choices)
    if value not in options:
        raise ValidationError.for_field(name, f"{name} must be one of: {', '.join(options)}")
    return value


def query_text(
    args: Mapping[str, Any], name: str, *, required: bool = False, max_length: int = 100
) -> Optional[str]:
    text = str(args.get(name) or "").strip()
    if not text:
        if required:
            raise ValidationError.for_field(name, f"Search term ({name}) is required")
        return None
    if len(text) > max_length:
        raise ValidationError.for_field(
            name, f"{name} must be between 1 and {max_length} characters"
        )
    return text
