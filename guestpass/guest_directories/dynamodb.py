"""DynamoDB-backed guest directory."""

from __future__ import annotations

from typing import Optional

import boto3
import structlog
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from guestpass.config import DEFAULT_TIMEOUT
from guestpass.core.guest_directory import GuestDirectory
from guestpass.exceptions import GuestDirectoryError

log = structlog.get_logger()


class DynamoDBGuestDirectory(GuestDirectory):
    """
    Reads guest to directory handle mappings from a DynamoDB table.

    Expects table schema:
    - PK: email (lowercase string)
    - Attributes: auth_user_id (string, optional), guest_id, event_id, ...

    Requires AWS credentials with dynamodb:GetItem permission.

    Example:
        directory = DynamoDBGuestDirectory(
            table_name="guests-prod",
            region="us-east-1"
        )
        handle = await directory.get_auth_handle("guest@example.com")
    """

    def __init__(
        self,
        table_name: str,
        region: str,
        endpoint_url: Optional[str] = None,  # For LocalStack testing
        handle_attribute: str = 'auth_user_id',
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize DynamoDB guest directory.

        Args:
            table_name: Name of the DynamoDB table containing guest records
            region: AWS region where the table is located
            endpoint_url: Optional endpoint URL for LocalStack/testing
            handle_attribute: Item attribute holding the directory handle
            timeout: Connect and read timeout in seconds
        """
        self._table_name = table_name
        self._handle_attribute = handle_attribute
        self._dynamodb = boto3.client(
            'dynamodb',
            region_name=region,
            endpoint_url=endpoint_url,
            config=Config(connect_timeout=timeout, read_timeout=timeout),
        )
        log.info("Initialized DynamoDB guest directory", table_name=table_name, region=region)

    async def get_auth_handle(self, email: str) -> Optional[str]:
        """Look up a guest by email (GetItem).

        Args:
            email: Normalized guest email

        Returns:
            The stored handle, or None if the guest is unknown or has no handle

        Raises:
            GuestDirectoryError: If the table cannot be read
        """
        try:
            response = self._dynamodb.get_item(
                TableName=self._table_name,
                Key={'email': {'S': email}},
                ProjectionExpression='#handle',
                ExpressionAttributeNames={'#handle': self._handle_attribute},
            )
        except (ClientError, BotoCoreError) as e:
            log.error(
                "DynamoDB guest lookup failed",
                table_name=self._table_name,
                email=email,
                error=str(e)
            )
            raise GuestDirectoryError(
                f"Failed to query guest from DynamoDB: {e}"
            ) from e

        item = response.get('Item')
        if not item:
            log.debug("Guest not found in DynamoDB", email=email)
            return None

        handle = item.get(self._handle_attribute, {}).get('S')
        if not handle:
            log.debug("Guest has no stored handle", email=email)
            return None
        return handle
