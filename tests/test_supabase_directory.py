"""Tests for SupabaseDirectoryClient with a stubbed requests session."""

from unittest.mock import Mock

import pytest
import requests

from conftest import make_response
from guestpass import CreateStatus, DirectoryError, SupabaseDirectoryClient
from guestpass.directory_clients.supabase import is_conflict

USERS_URL = "https://project.supabase.co/auth/v1/admin/users"


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def client(supabase_config, session):
    return SupabaseDirectoryClient(supabase_config, session=session)


def _sent(session):
    """Return (method, url, kwargs) of the last request."""
    args, kwargs = session.request.call_args
    return args[0], args[1], kwargs


# ==================== Conflict classification ====================


@pytest.mark.parametrize(
    "message, error_code",
    [
        ("A user with this email address has already been registered", None),
        ("User already registered", None),
        ("Something else", "email_exists"),
        (None, "user_already_exists"),
    ],
)
def test_is_conflict(message, error_code):
    assert is_conflict(message, error_code)


@pytest.mark.parametrize("message, error_code", [("Database error saving new user", None), (None, None), ("", "weak_password")])
def test_is_not_conflict(message, error_code):
    assert not is_conflict(message, error_code)


# ==================== create_account ====================


@pytest.mark.asyncio
async def test_create_account(client, session):
    session.request.return_value = make_response(200, {"id": "u-1", "email": "g1@ex.com"})

    outcome = await client.create_account("g1@ex.com", "p1", {"role": "guest", "guest_id": "G1"})

    assert outcome.status == CreateStatus.CREATED
    assert outcome.handle == "u-1"

    method, url, kwargs = _sent(session)
    assert method == "POST"
    assert url == USERS_URL
    assert kwargs["timeout"] == 5.0
    assert kwargs["headers"]["apikey"] == "service-role-key"
    assert kwargs["headers"]["Authorization"] == "Bearer service-role-key"
    body = kwargs["json"]
    assert body["email"] == "g1@ex.com"
    assert body["password"] == "p1"
    assert body["email_confirm"] is True
    assert body["user_metadata"] == {"role": "guest", "guest_id": "G1"}
    assert body["app_metadata"] == {"provider": "email", "providers": ["email", "guest"]}


@pytest.mark.asyncio
async def test_create_account_wrapped_user(client, session):
    session.request.return_value = make_response(200, {"user": {"id": "u-2"}})

    outcome = await client.create_account("g1@ex.com", "p1", {})

    assert outcome.handle == "u-2"


@pytest.mark.asyncio
async def test_create_account_conflict_by_message(client, session):
    session.request.return_value = make_response(
        422, {"msg": "A user with this email address has already been registered"}
    )

    outcome = await client.create_account("g1@ex.com", "p1", {})

    assert outcome.status == CreateStatus.CONFLICT
    assert outcome.handle is None
    assert "already been registered" in outcome.message


@pytest.mark.asyncio
async def test_create_account_conflict_by_error_code(client, session):
    session.request.return_value = make_response(422, {"code": 422, "error_code": "email_exists", "msg": "Conflict"})

    outcome = await client.create_account("g1@ex.com", "p1", {})

    assert outcome.status == CreateStatus.CONFLICT


@pytest.mark.asyncio
async def test_create_account_other_error_raises(client, session):
    session.request.return_value = make_response(500, {"msg": "Database error saving new user"})

    with pytest.raises(DirectoryError) as exc:
        await client.create_account("g1@ex.com", "p1", {})

    assert exc.value.operation == "create_account"
    assert exc.value.provider_message == "Database error saving new user"


@pytest.mark.asyncio
async def test_create_account_without_id_raises(client, session):
    session.request.return_value = make_response(200, {"email": "g1@ex.com"})

    with pytest.raises(DirectoryError):
        await client.create_account("g1@ex.com", "p1", {})


@pytest.mark.asyncio
async def test_create_account_invalid_json_raises(client, session):
    session.request.return_value = make_response(200, text="<html>gateway</html>")

    with pytest.raises(DirectoryError) as exc:
        await client.create_account("g1@ex.com", "p1", {})

    assert "invalid response" in exc.value.message


@pytest.mark.asyncio
async def test_transport_error_raises_directory_error(client, session):
    session.request.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(DirectoryError) as exc:
        await client.create_account("g1@ex.com", "p1", {})

    assert "Failed to reach Supabase" in exc.value.message


@pytest.mark.asyncio
async def test_timeout_raises_directory_error(client, session):
    session.request.side_effect = requests.Timeout("read timed out")

    with pytest.raises(DirectoryError):
        await client.list_accounts(page_size=10)


# ==================== update_account ====================


@pytest.mark.asyncio
async def test_update_account_password_and_metadata(client, session):
    session.request.return_value = make_response(200, {"id": "u-1"})

    await client.update_account("u-1", password="p2", metadata={"role": "guest"})

    method, url, kwargs = _sent(session)
    assert method == "PUT"
    assert url == f"{USERS_URL}/u-1"
    assert kwargs["json"] == {
        "password": "p2",
        "user_metadata": {"role": "guest"},
        "app_metadata": {"provider": "email", "providers": ["email", "guest"]},
    }


@pytest.mark.asyncio
async def test_update_account_password_only(client, session):
    session.request.return_value = make_response(200, {"id": "u-1"})

    await client.update_account("u-1", password="p2")

    _, _, kwargs = _sent(session)
    assert kwargs["json"] == {"password": "p2"}


@pytest.mark.asyncio
async def test_update_account_nothing_to_change(client, session):
    await client.update_account("u-1")

    session.request.assert_not_called()


@pytest.mark.asyncio
async def test_update_account_unknown_user_raises(client, session):
    session.request.return_value = make_response(404, {"msg": "User not found"})

    with pytest.raises(DirectoryError) as exc:
        await client.update_account("missing", password="p2")

    assert exc.value.operation == "update_account"
    assert exc.value.provider_message == "User not found"


# ==================== query_by_email / list_accounts ====================


@pytest.mark.asyncio
async def test_query_by_email(client, session):
    session.request.return_value = make_response(
        200,
        {
            "users": [
                {"id": "u-1", "email": "g1@ex.com", "user_metadata": {"role": "guest"}},
                {"id": "u-2", "email": "xg1@ex.com"},
            ]
        },
    )

    records = await client.query_by_email("g1@ex.com")

    assert [r.handle for r in records] == ["u-1", "u-2"]
    assert records[0].metadata == {"role": "guest"}
    assert records[1].metadata == {}
    _, _, kwargs = _sent(session)
    assert kwargs["params"] == {"filter": "g1@ex.com", "page": 1, "per_page": 50}


@pytest.mark.asyncio
async def test_query_by_email_error_raises(client, session):
    session.request.return_value = make_response(400, {"error": "bad filter"})

    with pytest.raises(DirectoryError) as exc:
        await client.query_by_email("g1@ex.com")

    assert exc.value.provider_message == "bad filter"


@pytest.mark.asyncio
async def test_list_accounts_full_page_has_more(client, session):
    session.request.return_value = make_response(
        200, {"users": [{"id": "u-1", "email": "a@ex.com"}, {"id": "u-2", "email": "b@ex.com"}]}
    )

    page = await client.list_accounts(page_size=2, cursor="3")

    assert page.has_more is True
    assert page.next_cursor == "4"
    _, _, kwargs = _sent(session)
    assert kwargs["params"] == {"page": 3, "per_page": 2}


@pytest.mark.asyncio
async def test_list_accounts_short_page_is_last(client, session):
    session.request.return_value = make_response(200, [{"id": "u-1", "email": "a@ex.com"}])

    page = await client.list_accounts(page_size=2)

    assert [r.email for r in page.records] == ["a@ex.com"]
    assert page.has_more is False
    assert page.next_cursor is None


@pytest.mark.asyncio
async def test_list_accounts_unexpected_shape_raises(client, session):
    session.request.return_value = make_response(200, {"users": "nope"})

    with pytest.raises(DirectoryError):
        await client.list_accounts(page_size=2)


@pytest.mark.asyncio
async def test_find_account_by_email_falls_back_to_scan(supabase_config, session):
    """Substring query results are filtered; the scan finds the exact match."""
    client = SupabaseDirectoryClient(supabase_config, session=session)
    session.request.side_effect = [
        make_response(200, {"users": [{"id": "near", "email": "xg1@ex.com"}]}),
        make_response(200, {"users": [{"id": "u-9", "email": "G1@ex.com"}]}),
    ]

    handle = await client.find_account_by_email("g1@ex.com", page_size=10, max_pages=2)

    assert handle == "u-9"
    assert session.request.call_count == 2
