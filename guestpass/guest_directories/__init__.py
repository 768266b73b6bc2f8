"""Guest directory implementations for looking up stored directory handles."""

from guestpass.guest_directories.dynamodb import DynamoDBGuestDirectory
from guestpass.guest_directories.mock import MockGuestDirectory
from guestpass.guest_directories.supabase import SupabaseGuestDirectory

__all__ = [
    "DynamoDBGuestDirectory",
    "MockGuestDirectory",
    "SupabaseGuestDirectory",
]
