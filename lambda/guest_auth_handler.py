"""AWS Lambda handlers for guest account endpoints (API Gateway proxy events).

Exposes two functions:
    - provision_handler: create or update a guest account (POST, GET as debug fallback)
    - reset_password_handler: set a new password on an existing guest account (POST)

Environment Variables:
    GUESTPASS_PROVIDER: "supabase" (default) or "cognito"
    SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY: Supabase credentials
    AWS_REGION, COGNITO_USER_POOL_ID: Cognito settings
    GUESTPASS_ALLOWED_ORIGINS: Comma-separated CORS origins (default: any)
    GUESTPASS_SCAN_PAGE_SIZE, GUESTPASS_SCAN_MAX_PAGES: Email scan bounds

Deployment:
    Package this Lambda with guestpass as a dependency layer and route each
    endpoint to its function.
"""

import asyncio
import json
import os

import structlog

from guestpass import CognitoConfig, ResolutionConfig, SupabaseConfig, create_factory
from guestpass.handlers import handle_password_reset, handle_provision

log = structlog.get_logger()

_factory = None


def _get_factory():
    """Build the factory once per Lambda container."""
    global _factory
    if _factory is None:
        provider_type = os.getenv("GUESTPASS_PROVIDER", "supabase")
        config = CognitoConfig.from_env() if provider_type == "cognito" else SupabaseConfig.from_env()
        _factory = create_factory(
            provider_type,
            config=config,
            resolution=ResolutionConfig.from_env(),
        )
    return _factory


def _cors_headers(event):
    allowed = [o.strip() for o in os.getenv("GUESTPASS_ALLOWED_ORIGINS", "").split(",") if o.strip()]
    # REST API proxy events keep the client's header casing
    headers = {k.lower(): v for k, v in (event.get("headers") or {}).items()}
    origin = headers.get("origin")
    return {
        "Access-Control-Allow-Origin": origin if origin in allowed else "*",
        "Access-Control-Allow-Methods": "POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, Authorization",
        "Access-Control-Max-Age": "86400",
    }


def _response(event, status_code, body=None):
    headers = _cors_headers(event)
    headers["Content-Type"] = "application/json"
    return {
        "statusCode": status_code,
        "headers": headers,
        "body": json.dumps(body) if body is not None else "",
    }


def _payload(event):
    if event.get("httpMethod") == "GET":
        return event.get("queryStringParameters") or {}
    try:
        payload = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError:
        return {}
    return payload if isinstance(payload, dict) else {}


def provision_handler(event, context):
    """Create or update a guest account and return its auth user id."""
    method = event.get("httpMethod")
    if method == "OPTIONS":
        return _response(event, 200)
    if method not in ("POST", "GET"):
        return _response(event, 405, {"error": "Method not allowed"})

    try:
        provisioner = _get_factory().create_provisioner()
    except ValueError as e:
        log.error("guest_auth_handler_misconfigured", error=str(e))
        return _response(event, 500, {"error": "Server missing directory credentials"})

    result = asyncio.run(handle_provision(_payload(event), provisioner))
    return _response(event, result.status_code, result.body)


def reset_password_handler(event, context):
    """Update the password of an existing guest account (never creates)."""
    method = event.get("httpMethod")
    if method == "OPTIONS":
        return _response(event, 204)
    if method != "POST":
        return _response(event, 405, {"error": "Method Not Allowed"})

    try:
        resetter = _get_factory().create_password_resetter()
    except ValueError as e:
        log.error("guest_auth_handler_misconfigured", error=str(e))
        return _response(event, 500, {"error": "Missing directory environment variables"})

    result = asyncio.run(handle_password_reset(_payload(event), resetter))
    return _response(event, result.status_code, result.body)
