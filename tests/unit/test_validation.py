"""Tests for argument validation and caller authorization."""

from typing import Any

import pytest

from src.utils.appsync_types import ResolverEvent
from src.utils.auth import require_caller
from src.utils.errors import AppError, ErrorCode
from src.utils.validation import (
    optional_string_argument,
    require_string_argument,
    validate_username,
)


def _event(**arguments: Any) -> ResolverEvent:
    return ResolverEvent.from_event({"fieldName": "f", "arguments": arguments})


class TestOptionalStringArgument:
    """Tests for optional_string_argument."""

    def test_absent_is_none(self) -> None:
        assert optional_string_argument(_event(), "username") is None

    def test_string_returned_as_is(self) -> None:
        assert optional_string_argument(_event(username=" bob "), "username") == " bob "

    @pytest.mark.parametrize("value", [7, 3.2, False, ["bob"], {"S": "bob"}])
    def test_wrong_type_rejected(self, value: Any) -> None:
        with pytest.raises(AppError) as exc_info:
            optional_string_argument(_event(username=value), "username")

        assert exc_info.value.error_code == ErrorCode.INVALID_ARGUMENT
        assert exc_info.value.details == {"argument": "username"}


class TestRequireStringArgument:
    """Tests for require_string_argument."""

    def test_present(self) -> None:
        assert require_string_argument(_event(userId="u-1"), "userId") == "u-1"

    @pytest.mark.parametrize("arguments", [{}, {"userId": ""}])
    def test_missing_or_empty(self, arguments: Any) -> None:
        with pytest.raises(AppError) as exc_info:
            require_string_argument(_event(**arguments), "userId")

        assert exc_info.value.error_code == ErrorCode.INVALID_ARGUMENT
        assert exc_info.value.message == "userId is required"


class TestValidateUsername:
    """Tests for validate_username."""

    def test_trims(self) -> None:
        assert validate_username("  Alice  ") == "Alice"

    def test_inner_whitespace_kept(self) -> None:
        assert validate_username(" Mary Ann ") == "Mary Ann"

    @pytest.mark.parametrize("username", [None, "", "   ", "\n\t"])
    def test_blank(self, username: Any) -> None:
        with pytest.raises(AppError, match="username cannot be empty"):
            validate_username(username)


class TestRequireCaller:
    """Tests for require_caller."""

    def test_returns_subject(self) -> None:
        event = ResolverEvent.from_event({"fieldName": "f", "identity": {"sub": "U1"}})
        assert require_caller(event) == "U1"

    @pytest.mark.parametrize("identity", [None, {}, {"sub": ""}, {"username": "api-key-user"}])
    def test_unauthorized(self, identity: Any) -> None:
        event = ResolverEvent.from_event({"fieldName": "f", "identity": identity})

        with pytest.raises(AppError) as exc_info:
            require_caller(event)

        assert exc_info.value.error_code == ErrorCode.UNAUTHORIZED
