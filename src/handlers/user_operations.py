"""
Lambda resolvers for User profile operations.

getUser reads any user's public profile by id. updateUser only ever writes
the caller's own item: the key comes from the Cognito identity, never from
the arguments.
"""

from typing import Any, Callable, Dict, Optional

# Handle both Lambda (absolute) and unit test (relative) imports
try:
    from utils.appsync_types import ResolverEvent  # type: ignore[import-not-found]
    from utils.auth import require_caller  # type: ignore[import-not-found]
    from utils.dynamodb import UsersStore, get_users_store  # type: ignore[import-not-found]
    from utils.errors import AppError, ErrorCode  # type: ignore[import-not-found]
    from utils.logging import StructuredLogger, get_correlation_id, get_logger  # type: ignore[import-not-found]
    from utils.responses import ProfileRecord, UserResponse, from_updates, to_record  # type: ignore[import-not-found]
    from utils.validation import (  # type: ignore[import-not-found]
        optional_string_argument,
        require_string_argument,
        validate_username,
    )
except ModuleNotFoundError:
    from ..utils.appsync_types import ResolverEvent
    from ..utils.auth import require_caller
    from ..utils.dynamodb import UsersStore, get_users_store
    from ..utils.errors import AppError, ErrorCode
    from ..utils.logging import StructuredLogger, get_correlation_id, get_logger
    from ..utils.responses import ProfileRecord, UserResponse, from_updates, to_record
    from ..utils.validation import (
        optional_string_argument,
        require_string_argument,
        validate_username,
    )

logger = get_logger(__name__)


class GetProfileOperation:
    """Handles the getUser query."""

    def __init__(self, store: UsersStore) -> None:
        self.store = store

    def execute(self, event: ResolverEvent, log: StructuredLogger = logger) -> Optional[ProfileRecord]:
        """
        Fetch a user profile by id.

        No authorization check: any caller the API admits may read any profile.

        Args:
            event: Parsed resolver event with a `userId` argument

        Returns:
            The decoded profile, or None if no item exists for the id

        Raises:
            AppError: INVALID_ARGUMENT if userId is missing or empty,
                STORE_UNAVAILABLE if the read fails
        """
        user_id = require_string_argument(event, "userId")
        log.info("Fetching user profile", userId=user_id)

        item = self.store.get(user_id)
        if item is None:
            log.info("User not found", userId=user_id)
            return None

        return to_record(item)


class UpdateProfileOperation:
    """Handles the updateUser mutation."""

    def __init__(self, store: UsersStore) -> None:
        self.store = store

    def execute(self, event: ResolverEvent, log: StructuredLogger = logger) -> ProfileRecord:
        """
        Update the caller's username.

        Args:
            event: Parsed resolver event with an identity and a `username` argument

        Returns:
            The full profile as stored after the update

        Raises:
            AppError: UNAUTHORIZED without a caller identity, INVALID_ARGUMENT
                if username is missing or blank, STORE_UNAVAILABLE if the
                write fails
        """
        user_id = require_caller(event)
        username = validate_username(optional_string_argument(event, "username"))

        if event.has_argument("userId") and event.argument("userId") != user_id:
            log.warning("Ignoring userId argument on updateUser", callerId=user_id)

        log.info("Updating username", userId=user_id, username=username)

        attributes = self.store.update_set_fields(user_id, from_updates({"username": username}))
        record = to_record(attributes)

        log.info("User profile updated", userId=user_id)
        return record


# Lambda entrypoints

_operations: Dict[str, Callable[[UsersStore], Any]] = {
    "getUser": GetProfileOperation,
    "updateUser": UpdateProfileOperation,
}


def _resolve(event: Dict[str, Any], field_name: Optional[str] = None) -> Optional[UserResponse]:
    log = logger.with_correlation_id(get_correlation_id(event))

    # A missing USERS_TABLE_NAME fails the process here, not as a resolver error
    store = get_users_store()

    try:
        resolver_event = ResolverEvent.from_event(event)
        field = field_name or resolver_event.field_name
        log.info(
            "User resolver invoked",
            typeName=resolver_event.type_name,
            fieldName=resolver_event.field_name,
        )

        operation_cls = _operations.get(field)
        if operation_cls is None:
            raise AppError(
                ErrorCode.INVALID_ARGUMENT,
                f"Unsupported field: {field}",
                {"fieldName": field},
            )

        record = operation_cls(store).execute(resolver_event, log)
        return record.to_dict() if record is not None else None

    except AppError as e:
        log.warning("User resolver failed", errorCode=e.error_code, error=e.message)
        raise
    except Exception as e:
        log.error("Unexpected error resolving user field", error=str(e))
        raise AppError(ErrorCode.INTERNAL_ERROR, f"Failed to resolve user field: {e}") from e


def get_user(event: Dict[str, Any], context: Any) -> Optional[UserResponse]:
    """
    Lambda handler for the getUser query.

    Args:
        event: AppSync resolver event with arguments.userId
        context: Lambda context (unused)

    Returns:
        User dict, or None when the user does not exist
    """
    return _resolve(event, "getUser")


def update_user(event: Dict[str, Any], context: Any) -> Optional[UserResponse]:
    """
    Lambda handler for the updateUser mutation.

    Args:
        event: AppSync resolver event with identity and arguments.username
        context: Lambda context (unused)

    Returns:
        Updated User dict
    """
    return _resolve(event, "updateUser")


def handler(event: Dict[str, Any], context: Any) -> Optional[UserResponse]:
    """Single entrypoint for both fields, dispatched on fieldName."""
    return _resolve(event)
