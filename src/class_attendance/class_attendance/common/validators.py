from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_id(value: object, field_name: str) -> str:
    """Record ids are opaque strings; reject blanks early."""
    return require_non_empty("" if value is None else str(value), field_name)
