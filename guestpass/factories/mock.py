"""Factory for mock/testing components."""

from typing import Optional

from guestpass.config import ResolutionConfig
from guestpass.core.factory import GuestpassFactory
from guestpass.core.guest_directory import GuestDirectory
from guestpass.directory_clients.mock import MockDirectoryClient


class MockFactory(GuestpassFactory):
    """Factory for mock/testing components.

    Creates in-memory components that don't require credentials or network
    access. Pre-built mocks can be passed in so tests can seed accounts and
    inspect recorded calls.

    Examples:
        >>> client = MockDirectoryClient()
        >>> factory = MockFactory(client=client)
        >>> handle = await factory.create_provisioner().provision(
        ...     "g1@ex.com", "p1", guest_id="G1", event_id="E1"
        ... )
        >>> client.get_password(handle)
        'p1'
    """

    def __init__(
        self,
        client: Optional[MockDirectoryClient] = None,
        guest_directory: Optional[GuestDirectory] = None,
        resolution: Optional[ResolutionConfig] = None,
    ):
        super().__init__(resolution)
        self._client = client or MockDirectoryClient()
        self._guest_directory = guest_directory

    def create_directory_client(self) -> MockDirectoryClient:
        return self._client

    def create_guest_directory(self) -> Optional[GuestDirectory]:
        return self._guest_directory
