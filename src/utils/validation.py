"""
Input validation utilities.

Validates resolver arguments before anything touches the users table.
"""

from typing import Optional

from .appsync_types import ResolverEvent, as_string
from .errors import AppError, ErrorCode


def optional_string_argument(event: ResolverEvent, name: str) -> Optional[str]:
    """
    Extract an optional string argument.

    Args:
        event: Parsed resolver event
        name: Argument name

    Returns:
        The string value, or None when the argument is absent

    Raises:
        AppError: If the argument is present but not a string
    """
    value = event.argument(name)
    if value is None:
        return None

    text = as_string(value)
    if text is None:
        raise AppError(
            ErrorCode.INVALID_ARGUMENT,
            f"{name} must be a string",
            {"argument": name},
        )
    return text


def require_string_argument(event: ResolverEvent, name: str) -> str:
    """
    Extract a required, non-empty string argument.

    Args:
        event: Parsed resolver event
        name: Argument name

    Returns:
        The string value, unmodified

    Raises:
        AppError: If the argument is missing, empty, or not a string
    """
    value = optional_string_argument(event, name)
    if not value:
        raise AppError(ErrorCode.INVALID_ARGUMENT, f"{name} is required", {"argument": name})
    return value


def validate_username(username: Optional[str]) -> str:
    """
    Validate a new username.

    Args:
        username: Raw username argument

    Returns:
        Username with surrounding whitespace removed

    Raises:
        AppError: If the username is missing or blank
    """
    trimmed = (username or "").strip()
    if not trimmed:
        raise AppError(
            ErrorCode.INVALID_ARGUMENT, "username cannot be empty", {"argument": "username"}
        )
    return trimmed
