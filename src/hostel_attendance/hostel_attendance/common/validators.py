from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    raise ValidationError(f"{field_name} must be a boolean")


def require_date(value: Any, field_name: str) -> date:
    try:
        return parse_iso_date(str(value) if value is not None else "")
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO-8601 date") from None


def optional_coordinate(value: Any, field_name: str, *, low: float, high: float) -> Optional[float]:
    """Parse a coordinate sent as string or number; ``None`` when absent."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number") from None
    if not low <= number <= high:
        raise ValidationError(f"{field_name} out of range")
    return number
