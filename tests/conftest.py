"""Shared pytest fixtures for guestpass tests."""

import json
import os

import boto3
import pytest
import requests
from moto import mock_aws

from guestpass import (
    CognitoConfig,
    MockDirectoryClient,
    MockFactory,
    MockGuestDirectory,
    ResolutionConfig,
    SupabaseConfig,
)

GUEST_CUSTOM_ATTRIBUTES = ["role", "provider", "guest_id", "event_id", "company_id"]


def make_response(status_code, body=None, text=None):
    """Build a real requests.Response carrying a JSON (or raw text) body."""
    response = requests.Response()
    response.status_code = status_code
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
    else:
        response._content = (text or "").encode("utf-8")
    response.encoding = "utf-8"
    return response


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for testing."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def mock_aws_services(aws_credentials):
    """Mock Cognito and DynamoDB."""
    with mock_aws():
        yield


@pytest.fixture
def region():
    """AWS region for tests."""
    return "us-east-1"


@pytest.fixture
def user_pool_id(mock_aws_services, region):
    """Cognito user pool declaring the guest custom attributes."""
    client = boto3.client("cognito-idp", region_name=region)
    response = client.create_user_pool(
        PoolName="guests",
        Policies={
            "PasswordPolicy": {
                "MinimumLength": 6,
                "RequireUppercase": False,
                "RequireLowercase": False,
                "RequireNumbers": False,
                "RequireSymbols": False,
            }
        },
        Schema=[
            {"Name": name, "AttributeDataType": "String", "Mutable": True}
            for name in GUEST_CUSTOM_ATTRIBUTES
        ],
    )
    return response["UserPool"]["Id"]


@pytest.fixture
def cognito_config(user_pool_id, region):
    return CognitoConfig(region=region, user_pool_id=user_pool_id)


@pytest.fixture
def guest_table(mock_aws_services, region):
    """DynamoDB guests table keyed by email."""
    client = boto3.client("dynamodb", region_name=region)
    client.create_table(
        TableName="guests",
        KeySchema=[{"AttributeName": "email", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "email", "AttributeType": "S"}],
        BillingMode="PAY_PER_REQUEST",
    )
    return "guests"


@pytest.fixture
def supabase_config():
    return SupabaseConfig(
        url="https://project.supabase.co/",
        service_role_key="service-role-key",
        timeout=5.0,
    )


@pytest.fixture
def directory():
    """Empty in-memory identity directory."""
    return MockDirectoryClient()


@pytest.fixture
def guest_directory():
    """Empty in-memory guest directory."""
    return MockGuestDirectory()


@pytest.fixture
def mock_factory(directory, guest_directory):
    return MockFactory(
        client=directory,
        guest_directory=guest_directory,
        resolution=ResolutionConfig(page_size=2, max_pages=5),
    )
