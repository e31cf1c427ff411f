"""Item identifier validation."""
from __future__ import annotations

import re

from models import TrackedItem
from services.errors import ValidationError

ITEM_ID_PATTERN = re.compile(r"[0-9]{12}")


def is_valid(raw: str | None) -> bool:
    if not isinstance(raw, str):
        return False
    return ITEM_ID_PATTERN.fullmatch(raw.strip()) is not None


def parse_item_id(raw: str | None) -> TrackedItem:
    """Return a TrackedItem for ``raw`` or raise ValidationError."""
    if raw is None or not raw.strip():
        raise ValidationError("Item ID is required")
    if not is_valid(raw):
        raise ValidationError("Invalid item ID")
    return TrackedItem(raw.strip())
