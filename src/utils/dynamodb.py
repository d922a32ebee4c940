"""
Users table access utilities.

Wraps the low-level DynamoDB client behind the two calls the resolvers
need, and converts every client failure into a STORE_UNAVAILABLE AppError.
"""

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import AppError, ErrorCode
from .logging import get_logger

if TYPE_CHECKING:
    from mypy_boto3_dynamodb import DynamoDBClient

logger = get_logger(__name__)

USERS_TABLE_ENV = "USERS_TABLE_NAME"
KEY_ATTRIBUTE = "userId"

# Process-scoped store; tests replace it via override_store
_store: Optional["UsersStore"] = None


def get_required_env(name: str, default: Optional[str] = None) -> str:
    """Get a required environment variable.

    In Lambda/production, the env var must be set. For tests, a default can be
    provided to allow the code to run in mocked environments.

    Args:
        name: Environment variable name
        default: Optional default for test environments

    Returns:
        The environment variable value

    Raises:
        ValueError: If the env var is not set (or empty) and no default is provided
    """
    value = os.getenv(name) or default
    if not value:
        raise ValueError(f"Required environment variable '{name}' is not set")
    return value


def _get_dynamodb_client() -> "DynamoDBClient":
    """Get DynamoDB client with optional endpoint override for LocalStack."""
    return boto3.client("dynamodb", endpoint_url=os.getenv("DYNAMODB_ENDPOINT"))


@dataclass(frozen=True)
class StoreConfig:
    """Where the users table lives. Validated when constructed."""

    table_name: str

    def __post_init__(self) -> None:
        if not self.table_name or not self.table_name.strip():
            raise ValueError("Users table name must not be empty")

    @classmethod
    def from_env(cls) -> "StoreConfig":
        """Build from USERS_TABLE_NAME; raises ValueError if it is not set."""
        return cls(table_name=get_required_env(USERS_TABLE_ENV))


def _store_error(verb: str, key: str, error: Exception) -> AppError:
    details: Dict[str, Any] = {"userId": key}
    if isinstance(error, ClientError):
        details["awsErrorCode"] = error.response.get("Error", {}).get("Code")

    logger.error(f"DynamoDB error on {verb}", error=str(error), **details)
    return AppError(
        ErrorCode.STORE_UNAVAILABLE,
        f"Failed to {verb} user profile: {error}",
        details,
    )


class UsersStore:
    """Keyed reads and writes against the users table (PK: userId)."""

    def __init__(self, config: StoreConfig, client: Optional["DynamoDBClient"] = None) -> None:
        self.config = config
        self.client = client if client is not None else _get_dynamodb_client()

    @property
    def table_name(self) -> str:
        return self.config.table_name

    def _key(self, key: str) -> Dict[str, Any]:
        return {KEY_ATTRIBUTE: {"S": key}}

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Fetch one item by userId.

        Args:
            key: userId of the item

        Returns:
            The item's attribute map, or None if no item exists

        Raises:
            AppError: STORE_UNAVAILABLE if the call fails
        """
        try:
            response = self.client.get_item(TableName=self.table_name, Key=self._key(key))
        except (ClientError, BotoCoreError) as e:
            raise _store_error("fetch", key, e) from e

        item = response.get("Item")
        if not item:
            return None
        return dict(item)

    def update_set_fields(self, key: str, field_values: Mapping[str, Dict[str, Any]]) -> Dict[str, Any]:
        """
        SET the given attributes on the item keyed by userId.

        Args:
            key: userId of the item to update
            field_values: Encoded attribute values to write

        Returns:
            The full item after the update

        Raises:
            ValueError: If no fields are given
            AppError: STORE_UNAVAILABLE if the call fails
        """
        if not field_values:
            raise ValueError("At least one field must be provided")

        update_expressions = []
        expression_attribute_names = {}
        expression_attribute_values = {}
        for name, value in field_values.items():
            update_expressions.append(f"#{name} = :{name}")
            expression_attribute_names[f"#{name}"] = name
            expression_attribute_values[f":{name}"] = value

        try:
            response = self.client.update_item(
                TableName=self.table_name,
                Key=self._key(key),
                UpdateExpression="SET " + ", ".join(update_expressions),
                ExpressionAttributeNames=expression_attribute_names,
                ExpressionAttributeValues=expression_attribute_values,
                ReturnValues="ALL_NEW",
            )
        except (ClientError, BotoCoreError) as e:
            raise _store_error("update", key, e) from e

        return dict(response.get("Attributes") or {})


def get_users_store() -> UsersStore:
    """Process-scoped store, built from the environment on first use."""
    global _store
    if _store is None:
        _store = UsersStore(StoreConfig.from_env())
    return _store


# Test utilities
def override_store(store: Optional[UsersStore]) -> None:
    """Override the process store for testing. Set to None to clear override."""
    global _store
    _store = store


def clear_store() -> None:
    """Drop the cached or overridden store (call in test teardown)."""
    override_store(None)
