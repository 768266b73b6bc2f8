"""AWS Cognito implementation of IdentityDirectoryClient."""

from __future__ import annotations

from typing import Any, Optional

import boto3
import structlog
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from guestpass.config import CognitoConfig
from guestpass.core.directory_client import IdentityDirectoryClient
from guestpass.exceptions import DirectoryError
from guestpass.models import AccountPage, CreateOutcome, IdentityRecord

log = structlog.get_logger()

# Custom attribute for role
ROLE_ATTRIBUTE = "custom:role"
# Custom attributes linking the account to guest records
GUEST_ID_ATTRIBUTE = "custom:guest_id"
EVENT_ID_ATTRIBUTE = "custom:event_id"
COMPANY_ID_ATTRIBUTE = "custom:company_id"
PROVIDER_ATTRIBUTE = "custom:provider"

# Metadata key -> Cognito attribute name
METADATA_ATTRIBUTES = {
    "role": ROLE_ATTRIBUTE,
    "provider": PROVIDER_ATTRIBUTE,
    "guest_id": GUEST_ID_ATTRIBUTE,
    "event_id": EVENT_ID_ATTRIBUTE,
    "company_id": COMPANY_ID_ATTRIBUTE,
    "first_name": "given_name",
    "last_name": "family_name",
    "email_verified": "email_verified",
}

# Error codes meaning the email is already taken
CONFLICT_ERROR_CODES = frozenset({"UsernameExistsException", "AliasExistsException"})

# Cognito max page size for ListUsers
MAX_LIST_LIMIT = 60


def _attribute_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class CognitoDirectoryClient(IdentityDirectoryClient):
    """AWS Cognito user pool as identity directory.

    Guest metadata is stored as ``custom:*`` attributes plus the standard
    ``given_name``/``family_name``/``email_verified`` attributes. The account
    handle is the Cognito username.

    Args:
        config: Region, user pool and timeout settings

    Note:
        Use CognitoFactory.create_directory_client() instead of instantiating directly.
        The user pool must declare the custom attributes listed in METADATA_ATTRIBUTES.
    """

    def __init__(self, config: CognitoConfig):
        self.region = config.region
        self._user_pool_id = config.user_pool_id
        self._endpoint_url = config.endpoint_url

        # Create client with optional custom endpoint; no automatic retries
        client_kwargs: dict[str, Any] = {
            "region_name": config.region,
            "config": Config(
                connect_timeout=config.timeout,
                read_timeout=config.timeout,
                retries={"total_max_attempts": 1, "mode": "standard"},
            ),
        }
        if config.endpoint_url:
            client_kwargs["endpoint_url"] = config.endpoint_url
        self._client = boto3.client("cognito-idp", **client_kwargs)

    def _parse_user_attributes(self, attributes: list[dict[str, str]]) -> dict[str, str]:
        """Parse Cognito user attributes into a dictionary."""
        return {attr["Name"]: attr["Value"] for attr in attributes}

    def _metadata_to_attributes(self, metadata: dict[str, Any]) -> tuple[list[dict[str, str]], list[str]]:
        """Split metadata into attributes to write and attribute names to clear."""
        to_write: list[dict[str, str]] = []
        to_clear: list[str] = []
        for key, attribute in METADATA_ATTRIBUTES.items():
            value = metadata.get(key)
            if value is None or value == "":
                to_clear.append(attribute)
            else:
                to_write.append({"Name": attribute, "Value": _attribute_value(value)})
        ignored = sorted(set(metadata) - set(METADATA_ATTRIBUTES))
        if ignored:
            log.debug("cognito_metadata_keys_ignored", keys=ignored)
        return to_write, to_clear

    def _cognito_user_to_record(self, user: dict[str, Any]) -> IdentityRecord:
        """Convert a Cognito user response to an IdentityRecord."""
        attrs = self._parse_user_attributes(user.get("Attributes", []))
        metadata: dict[str, Any] = {}
        for key, attribute in METADATA_ATTRIBUTES.items():
            if attribute in attrs:
                metadata[key] = attrs[attribute]
        if "email_verified" in metadata:
            metadata["email_verified"] = metadata["email_verified"].lower() == "true"
        return IdentityRecord(
            handle=user["Username"],
            email=attrs.get("email", ""),
            metadata=metadata,
        )

    def _directory_error(self, e: Exception, operation: str, action: str, **context: Any) -> DirectoryError:
        message = e.response["Error"].get("Message", str(e)) if isinstance(e, ClientError) else str(e)
        log.error(f"cognito_{operation}_error", error=str(e), pool_id=self._user_pool_id, **context)
        return DirectoryError(f"Failed to {action}: {e}", operation, provider_message=message)

    # ==================== IdentityDirectoryClient ====================

    async def create_account(
        self,
        email: str,
        password: str,
        metadata: dict[str, Any],
    ) -> CreateOutcome:
        """Create a confirmed user with a permanent password.

        The welcome message is suppressed; the password is set permanent so
        the guest does not hit a FORCE_CHANGE_PASSWORD challenge.
        """
        to_write, _ = self._metadata_to_attributes(metadata)
        user_attributes = [{"Name": "email", "Value": email}] + to_write

        try:
            response = self._client.admin_create_user(
                UserPoolId=self._user_pool_id,
                Username=email,
                UserAttributes=user_attributes,
                MessageAction="SUPPRESS",
            )
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            if error_code in CONFLICT_ERROR_CODES:
                log.info("cognito_user_exists", pool_id=self._user_pool_id, email=email)
                return CreateOutcome.conflict(e.response["Error"].get("Message"))
            raise self._directory_error(e, "create_account", "create account", email=email) from e
        except BotoCoreError as e:
            raise self._directory_error(e, "create_account", "create account", email=email) from e

        username = response["User"]["Username"]
        try:
            self._client.admin_set_user_password(
                UserPoolId=self._user_pool_id,
                Username=username,
                Password=password,
                Permanent=True,
            )
        except (ClientError, BotoCoreError) as e:
            raise self._directory_error(e, "create_account", "set initial password", email=email) from e

        log.info("cognito_user_created", pool_id=self._user_pool_id, handle=username, email=email)
        return CreateOutcome.created(username)

    async def update_account(
        self,
        handle: str,
        password: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        """Overwrite attributes and/or password of a Cognito user.

        Managed attributes missing from ``metadata`` are deleted, so the stored
        attributes always mirror the given document.
        """
        try:
            if metadata is not None:
                to_write, to_clear = self._metadata_to_attributes(metadata)
                if to_write:
                    self._client.admin_update_user_attributes(
                        UserPoolId=self._user_pool_id,
                        Username=handle,
                        UserAttributes=to_write,
                    )
                if to_clear:
                    current = self._client.admin_get_user(
                        UserPoolId=self._user_pool_id,
                        Username=handle,
                    )
                    present = self._parse_user_attributes(current.get("UserAttributes", []))
                    stale = [name for name in to_clear if name in present]
                    if stale:
                        self._client.admin_delete_user_attributes(
                            UserPoolId=self._user_pool_id,
                            Username=handle,
                            UserAttributeNames=stale,
                        )

            if password is not None:
                self._client.admin_set_user_password(
                    UserPoolId=self._user_pool_id,
                    Username=handle,
                    Password=password,
                    Permanent=True,
                )
        except (ClientError, BotoCoreError) as e:
            raise self._directory_error(e, "update_account", "update account", handle=handle) from e

        log.info(
            "cognito_user_updated",
            pool_id=self._user_pool_id,
            handle=handle,
            password_changed=password is not None,
            metadata_changed=metadata is not None,
        )

    async def query_by_email(self, email: str) -> list[IdentityRecord]:
        """Query users with a ListUsers email filter."""
        escaped = email.replace("\\", "\\\\").replace('"', '\\"')
        try:
            response = self._client.list_users(
                UserPoolId=self._user_pool_id,
                Filter=f'email = "{escaped}"',
            )
        except (ClientError, BotoCoreError) as e:
            raise self._directory_error(e, "query_by_email", "query users by email", email=email) from e
        return [self._cognito_user_to_record(u) for u in response.get("Users", [])]

    async def list_accounts(
        self,
        page_size: int,
        cursor: Optional[str] = None,
    ) -> AccountPage:
        """List users in the pool; the cursor is Cognito's PaginationToken."""
        params: dict[str, Any] = {
            "UserPoolId": self._user_pool_id,
            "Limit": min(page_size, MAX_LIST_LIMIT),
        }
        if cursor:
            params["PaginationToken"] = cursor

        try:
            response = self._client.list_users(**params)
        except (ClientError, BotoCoreError) as e:
            raise self._directory_error(e, "list_accounts", "list users") from e

        return AccountPage(
            records=[self._cognito_user_to_record(u) for u in response.get("Users", [])],
            next_cursor=response.get("PaginationToken"),
            has_more="PaginationToken" in response,
        )
