"""Small input validators shared by service functions."""

from typing import Optional

from common.exceptions import ValidationError


def require_id(value, field: str) -> int:
    """Coerce `value` to a positive integer id or raise `ValidationError`."""

    if isinstance(value, bool):
        raise ValidationError(f"{field} is invalid", field=field)
    try:
        ident = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} is invalid", field=field)
    if ident <= 0 or str(ident) != str(value).strip():
        raise ValidationError(f"{field} is invalid", field=field)
    return ident


def optional_limit(value) -> Optional[int]:
    """Return a non-negative integer bound, or None when no bound was given."""

    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError("limit must be a non-negative integer", field="limit")
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise ValidationError("limit must be a non-negative integer", field="limit")
    if limit < 0:
        raise ValidationError("limit must be a non-negative integer", field="limit")
    return limit
