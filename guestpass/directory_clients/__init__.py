"""Identity directory client implementations."""

from guestpass.directory_clients.cognito import (
    CognitoDirectoryClient,
    METADATA_ATTRIBUTES,
    ROLE_ATTRIBUTE,
)
from guestpass.directory_clients.mock import MockDirectoryClient
from guestpass.directory_clients.supabase import SupabaseDirectoryClient

__all__ = [
    "CognitoDirectoryClient",
    "MockDirectoryClient",
    "SupabaseDirectoryClient",
    "METADATA_ATTRIBUTES",
    "ROLE_ATTRIBUTE",
]
