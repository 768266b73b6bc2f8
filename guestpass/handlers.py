"""Request handlers translating provisioning outcomes into HTTP responses.

Status codes:
    200 - success, body ``{"auth_user_id": handle}``
    400 - missing required field
    404 - no account for the email (password reset only)
    500 - directory failure or unexpected error
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import structlog

from guestpass.exceptions import AccountNotFoundError, DirectoryError, MissingInputError
from guestpass.password_resetter import PasswordResetter
from guestpass.provisioner import GuestProvisioner

log = structlog.get_logger()

PROVISION_REQUIRED_FIELDS = ("email", "password", "event_id", "guest_id")


@dataclass
class HandlerResponse:
    """Transport-neutral response: status code plus JSON body."""

    status_code: int
    body: dict[str, Any] = field(default_factory=dict)


def _optional(payload: Mapping[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    return str(value) if value not in (None, "") else None


async def handle_provision(
    payload: Mapping[str, Any],
    provisioner: GuestProvisioner,
) -> HandlerResponse:
    """Handle a create-guest-account request."""
    if not isinstance(payload, Mapping):
        payload = {}
    try:
        handle = await provisioner.provision(
            email=str(payload.get("email") or ""),
            password=str(payload.get("password") or ""),
            guest_id=str(payload.get("guest_id") or ""),
            event_id=str(payload.get("event_id") or ""),
            first_name=_optional(payload, "first_name"),
            last_name=_optional(payload, "last_name"),
            company_id=_optional(payload, "company_id"),
        )
    except MissingInputError:
        return HandlerResponse(
            400, {"error": f"Missing fields: {', '.join(PROVISION_REQUIRED_FIELDS)}"}
        )
    except DirectoryError as e:
        return HandlerResponse(500, {"error": e.provider_message or e.message})
    except Exception as e:
        log.error("provision_request_failed", error=str(e), error_type=type(e).__name__)
        return HandlerResponse(500, {"error": "Internal server error"})

    return HandlerResponse(200, {"auth_user_id": handle})


async def handle_password_reset(
    payload: Mapping[str, Any],
    resetter: PasswordResetter,
) -> HandlerResponse:
    """Handle an update-guest-password request. Never creates accounts."""
    if not isinstance(payload, Mapping):
        payload = {}
    try:
        handle = await resetter.reset_password(
            email=str(payload.get("email") or ""),
            new_password=str(payload.get("password") or ""),
        )
    except MissingInputError:
        return HandlerResponse(400, {"error": "Missing email or password"})
    except AccountNotFoundError:
        return HandlerResponse(404, {"error": "user_not_found"})
    except DirectoryError as e:
        return HandlerResponse(500, {"error": e.provider_message or e.message})
    except Exception as e:
        log.error("password_reset_request_failed", error=str(e), error_type=type(e).__name__)
        return HandlerResponse(500, {"error": "Internal server error"})

    return HandlerResponse(200, {"auth_user_id": handle})
