"""Category form validation helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

from ...constants.finance import CATEGORY_TYPES
from ...validation import FormBase

NAME_MAX_LENGTH = 50
ICON_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 200

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9\s&-]+$")
_COLOR_PATTERN = re.compile(r"^#(?:[0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})$")
_ICON_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass
class CategoryForm(FormBase):
    """Create/update payload. In partial mode the type may not be sent."""

    fields = ("name", "type", "color", "icon", "description", "isActive")

    name: str = ""
    category_type: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None

    def validate(self) -> bool:
        self.errors.clear()

        if self.should_check("name"):
            self.name = self._required_text("name", "Category name", max_length=NAME_MAX_LENGTH)
            if self.name and "name" not in self.errors and not _NAME_PATTERN.match(self.name):
                self._add_error(
                    "name",
                    "Category name can only contain letters, numbers, spaces, ampersands, and hyphens",
                )

        if self.partial:
            if self.provided("type"):
                self._add_error("type", "Category type cannot be changed after creation")
        else:
            self.category_type = self._choice("type", "Category type", CATEGORY_TYPES)

        if self.provided("color"):
            self.color = self._text("color") or None
            if self.color and not _COLOR_PATTERN.match(self.color):
                self._add_error("color", "Color must be a valid hex color (e.g., #FF5733)")

        if self.provided("icon"):
            self.icon = self._optional_text("icon", "Icon name", ICON_MAX_LENGTH)
            if self.icon and not _ICON_PATTERN.match(self.icon):
                self._add_error(
                    "icon", "Icon must contain only letters, numbers, hyphens, and underscores"
                )

        if self.provided("description"):
            self.description = self._optional_text(
                "description", "Description", DESCRIPTION_MAX_LENGTH
            )

        if self.provided("isActive"):
            if self.partial:
                self.is_active = self._bool("isActive", "isActive", default=True)
            else:
                self._add_error("isActive", "isActive can only be set when updating")

        return not self.errors

    def changes(self) -> dict[str, Any]:
        """Model-field changes for a partial update."""

        result: dict[str, Any] = {}
        if self.provided("name"):
            result["name"] = self.name
        if self.provided("color"):
            result["color"] = self.color
        if self.provided("icon"):
            result["icon"] = self.icon
        if self.provided("description"):
            result["description"] = self.description
        if self.provided("isActive"):
            result["is_active"] = self.is_active
        return result
