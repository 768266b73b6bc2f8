"""Factory for AWS Cognito components."""

from typing import Optional

from guestpass.config import CognitoConfig, ResolutionConfig
from guestpass.core.directory_client import IdentityDirectoryClient
from guestpass.core.factory import GuestpassFactory
from guestpass.core.guest_directory import GuestDirectory


class CognitoFactory(GuestpassFactory):
    """Factory for AWS Cognito components.

    Creates a CognitoDirectoryClient for the configured user pool and, when
    ``config.guest_table_name`` is set, a DynamoDBGuestDirectory in the same
    region.

    Args:
        config: Region, user pool and timeout settings.
        resolution: Optional scan bounds for email resolution.
        guest_directory: Optional custom GuestDirectory used instead of the
            DynamoDB table.

    Examples:
        Using with LocalStack for local testing:
            >>> factory = CognitoFactory(config=CognitoConfig(
            ...     region="us-east-1",
            ...     user_pool_id="us-east-1_ABC123",
            ...     endpoint_url="http://localhost:4566",
            ... ))
            >>> provisioner = factory.create_provisioner()

    Note:
        AWS credentials must be configured via environment variables, AWS
        config files, or IAM roles.
    """

    def __init__(
        self,
        config: CognitoConfig,
        resolution: Optional[ResolutionConfig] = None,
        guest_directory: Optional[GuestDirectory] = None,
    ):
        super().__init__(resolution)
        self.config = config
        self._client: Optional[IdentityDirectoryClient] = None
        self._guest_directory: Optional[GuestDirectory] = guest_directory

    def create_directory_client(self) -> IdentityDirectoryClient:
        if self._client is None:
            from guestpass.directory_clients.cognito import CognitoDirectoryClient

            self._client = CognitoDirectoryClient(self.config)
        return self._client

    def create_guest_directory(self) -> Optional[GuestDirectory]:
        if self._guest_directory is None and self.config.guest_table_name:
            from guestpass.guest_directories.dynamodb import DynamoDBGuestDirectory

            self._guest_directory = DynamoDBGuestDirectory(
                table_name=self.config.guest_table_name,
                region=self.config.region,
                endpoint_url=self.config.endpoint_url,
                timeout=self.config.timeout,
            )
        return self._guest_directory
