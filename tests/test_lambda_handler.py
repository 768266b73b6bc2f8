"""Tests for the API Gateway Lambda entry points."""

import importlib.util
import json
from pathlib import Path

import pytest

from guestpass import MockDirectoryClient, MockFactory

HANDLER_PATH = Path(__file__).resolve().parent.parent / "lambda" / "guest_auth_handler.py"

PAYLOAD = {"email": "g1@ex.com", "password": "p1", "guest_id": "G1", "event_id": "E1"}


def _load_handler_module():
    spec = importlib.util.spec_from_file_location("guest_auth_handler", HANDLER_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _event(method, body=None, query=None, headers=None):
    return {
        "httpMethod": method,
        "headers": headers or {},
        "body": json.dumps(body) if body is not None and not isinstance(body, str) else body,
        "queryStringParameters": query,
    }


@pytest.fixture
def handler_module(monkeypatch):
    monkeypatch.delenv("GUESTPASS_ALLOWED_ORIGINS", raising=False)
    return _load_handler_module()


@pytest.fixture
def client():
    return MockDirectoryClient()


@pytest.fixture
def handler(handler_module, client):
    handler_module._factory = MockFactory(client=client)
    return handler_module


def _assert_cors(response):
    headers = response["headers"]
    assert "Access-Control-Allow-Origin" in headers
    assert headers["Access-Control-Allow-Methods"] == "POST, OPTIONS"
    assert headers["Content-Type"] == "application/json"


# ==================== provision_handler ====================


def test_provision_options_preflight(handler):
    response = handler.provision_handler(_event("OPTIONS"), None)

    assert response["statusCode"] == 200
    assert response["body"] == ""
    _assert_cors(response)


@pytest.mark.parametrize("method", ["PUT", "DELETE", "PATCH"])
def test_provision_rejects_other_methods(handler, method):
    response = handler.provision_handler(_event(method, PAYLOAD), None)

    assert response["statusCode"] == 405
    assert json.loads(response["body"]) == {"error": "Method not allowed"}
    _assert_cors(response)


def test_provision_post(handler, client):
    response = handler.provision_handler(_event("POST", PAYLOAD), None)

    assert response["statusCode"] == 200
    handle = json.loads(response["body"])["auth_user_id"]
    assert client.get_record(handle).email == "g1@ex.com"
    _assert_cors(response)


def test_provision_get_reads_query_string(handler, client):
    response = handler.provision_handler(_event("GET", query=PAYLOAD), None)

    assert response["statusCode"] == 200
    assert client.account_count == 1


def test_provision_missing_fields(handler):
    response = handler.provision_handler(_event("POST", {"email": "g1@ex.com"}), None)

    assert response["statusCode"] == 400
    assert json.loads(response["body"]) == {"error": "Missing fields: email, password, event_id, guest_id"}


@pytest.mark.parametrize("body", ["[]", '"x"', "42", "not json"])
def test_provision_non_object_body_is_missing_fields(handler, client, body):
    response = handler.provision_handler(_event("POST", body), None)

    assert response["statusCode"] == 400
    assert client.calls == []


def test_provision_missing_configuration(handler_module, monkeypatch):
    for name in ("GUESTPASS_PROVIDER", "SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY"):
        monkeypatch.delenv(name, raising=False)

    response = handler_module.provision_handler(_event("POST", PAYLOAD), None)

    assert response["statusCode"] == 500
    assert json.loads(response["body"]) == {"error": "Server missing directory credentials"}
    assert "SUPABASE" not in response["body"]
    _assert_cors(response)


# ==================== reset_password_handler ====================


def test_reset_options_preflight(handler):
    response = handler.reset_password_handler(_event("OPTIONS"), None)

    assert response["statusCode"] == 204
    _assert_cors(response)


@pytest.mark.parametrize("method", ["GET", "PUT"])
def test_reset_rejects_other_methods(handler, method):
    response = handler.reset_password_handler(_event(method, query=PAYLOAD), None)

    assert response["statusCode"] == 405
    assert json.loads(response["body"]) == {"error": "Method Not Allowed"}


def test_reset_post(handler, client):
    handle = client.seed("g1@ex.com")

    response = handler.reset_password_handler(_event("POST", {"email": "G1@ex.com", "password": "p2"}), None)

    assert response["statusCode"] == 200
    assert json.loads(response["body"]) == {"auth_user_id": handle}
    assert client.get_password(handle) == "p2"
    _assert_cors(response)


def test_reset_unknown_email(handler, client):
    response = handler.reset_password_handler(_event("POST", {"email": "missing@ex.com", "password": "p2"}), None)

    assert response["statusCode"] == 404
    assert client.account_count == 0


def test_reset_non_object_body(handler):
    response = handler.reset_password_handler(_event("POST", "[]"), None)

    assert response["statusCode"] == 400
    assert json.loads(response["body"]) == {"error": "Missing email or password"}


def test_reset_missing_configuration(handler_module, monkeypatch):
    monkeypatch.setenv("GUESTPASS_PROVIDER", "cognito")
    for name in ("AWS_REGION", "COGNITO_USER_POOL_ID"):
        monkeypatch.delenv(name, raising=False)

    response = handler_module.reset_password_handler(_event("POST", PAYLOAD), None)

    assert response["statusCode"] == 500
    assert json.loads(response["body"]) == {"error": "Missing directory environment variables"}


# ==================== CORS ====================


@pytest.mark.parametrize("header_name", ["origin", "Origin", "ORIGIN"])
def test_allowed_origin_is_echoed_any_casing(handler, monkeypatch, header_name):
    monkeypatch.setenv("GUESTPASS_ALLOWED_ORIGINS", "https://app.ex.com, https://admin.ex.com")

    response = handler.provision_handler(_event("OPTIONS", headers={header_name: "https://admin.ex.com"}), None)

    assert response["headers"]["Access-Control-Allow-Origin"] == "https://admin.ex.com"


def test_unknown_origin_falls_back_to_wildcard(handler, monkeypatch):
    monkeypatch.setenv("GUESTPASS_ALLOWED_ORIGINS", "https://app.ex.com")

    response = handler.provision_handler(_event("OPTIONS", headers={"Origin": "https://evil.ex.com"}), None)

    assert response["headers"]["Access-Control-Allow-Origin"] == "*"


def test_missing_headers_falls_back_to_wildcard(handler):
    event = _event("OPTIONS")
    event["headers"] = None

    response = handler.provision_handler(event, None)

    assert response["headers"]["Access-Control-Allow-Origin"] == "*"
