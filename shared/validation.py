"""
Request payload validation helpers.
"""

from typing import Any, Dict, Iterable, List, Optional

from .errors import InvalidInputError


def is_blank(value: Any) -> bool:
    """A value is blank when absent, None, or an all-whitespace string."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def missing_fields(data: Dict[str, Any], required: Iterable[str]) -> List[str]:
    """Return the required fields that are blank, in declaration order."""
    return [field for field in required if is_blank(data.get(field))]


def validate_required_fields(data: Dict[str, Any], required: Iterable[str]) -> None:
    """
    Check that every required field is present and non-empty.

    Raises:
        InvalidInputError: Naming all missing fields
    """
    missing = missing_fields(data, required)
    if missing:
        raise InvalidInputError(f"Missing required fields: {', '.join(missing)}")


def require_string(data: Dict[str, Any], field: str) -> str:
    """Return a required string field, trimmed."""
    value = data.get(field)
    if not isinstance(value, str):
        raise InvalidInputError(f"{field} must be a string")
    if not value.strip():
        raise InvalidInputError(f"{field} cannot be empty")
    return value.strip()


def optional_string(data: Dict[str, Any], field: str) -> Optional[str]:
    """Return an optional string field, trimmed; empty strings become None."""
    value = data.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidInputError(f"{field} must be a string")
    return value.strip() or None


def check_max_length(value: str, max_length: int, message: str) -> None:
    """Reject ``value`` when it is longer than ``max_length`` characters."""
    if len(value) > max_length:
        raise InvalidInputError(message)
