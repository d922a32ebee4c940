"""
Test fixtures for Lambda function tests.

Provides common test data and mocked AWS resources.
"""

import os
from typing import Any, Dict, Generator

import boto3
import pytest
from moto import mock_aws

from src.utils.dynamodb import StoreConfig, UsersStore, clear_store, override_store

USERS_TABLE_NAME = "neighborly-users-test"


@pytest.fixture
def aws_credentials() -> None:
    """Set fake AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
    os.environ["USERS_TABLE_NAME"] = USERS_TABLE_NAME


@pytest.fixture(autouse=True)
def reset_store() -> Generator[None, None, None]:
    """Never leak a process-scoped store between tests."""
    clear_store()
    yield
    clear_store()


@pytest.fixture
def dynamodb_client(aws_credentials: None) -> Generator[Any, None, None]:
    """Create the mock users table (PK: userId, GSI on email)."""
    with mock_aws():
        client = boto3.client("dynamodb", region_name="us-east-1")
        client.create_table(
            TableName=USERS_TABLE_NAME,
            KeySchema=[
                {"AttributeName": "userId", "KeyType": "HASH"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "userId", "AttributeType": "S"},
                {"AttributeName": "email", "AttributeType": "S"},
            ],
            GlobalSecondaryIndexes=[
                {
                    "IndexName": "EmailIndex",
                    "KeySchema": [
                        {"AttributeName": "email", "KeyType": "HASH"},
                    ],
                    "Projection": {"ProjectionType": "ALL"},
                },
            ],
            BillingMode="PAY_PER_REQUEST",
        )
        yield client


@pytest.fixture
def users_store(dynamodb_client: Any) -> UsersStore:
    """Store bound to the mock table and installed as the process store."""
    store = UsersStore(StoreConfig(USERS_TABLE_NAME), client=dynamodb_client)
    override_store(store)
    return store


@pytest.fixture
def sample_user_id() -> str:
    """Sample user ID (Cognito sub)."""
    return "user-123-456"


@pytest.fixture
def another_user_id() -> str:
    """Another user ID for cross-user tests."""
    return "user-789-xyz"


@pytest.fixture
def sample_user(dynamodb_client: Any, sample_user_id: str) -> Dict[str, Any]:
    """Create sample user in DynamoDB, in typed attribute format."""
    item = {
        "userId": {"S": sample_user_id},
        "email": {"S": "test@example.com"},
        "username": {"S": "TestUser"},
        "aboutMe": {"S": "Third floor, corner unit"},
        "joinedBuildings": {"L": [{"S": "bldg-1"}, {"S": "bldg-2"}]},
        "createdTime": {"S": "2024-01-01T00:00:00Z"},
    }
    dynamodb_client.put_item(TableName=USERS_TABLE_NAME, Item=item)
    return item


@pytest.fixture
def lambda_context() -> Any:
    """Mock Lambda context."""

    class Context:
        function_name = "test-function"
        memory_limit_in_mb = 128
        invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test-function"
        aws_request_id = "test-request-id"

    return Context()


@pytest.fixture
def appsync_event(sample_user_id: str) -> Dict[str, Any]:
    """Base AppSync event structure."""
    return {
        "typeName": "Query",
        "fieldName": "testField",
        "arguments": {},
        "identity": {
            "sub": sample_user_id,
            "issuer": "https://cognito-idp.us-east-1.amazonaws.com/us-east-1_test",
            "username": "testuser",
            "claims": {"email": "test@example.com"},
            "sourceIp": ["203.0.113.10"],
            "defaultAuthStrategy": "ALLOW",
        },
        "requestContext": {
            "requestId": "test-correlation-id",
        },
        "source": None,
        "request": {"headers": {}},
        "prev": None,
        "stash": {},
    }
