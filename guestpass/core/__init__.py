"""Core abstractions for the guestpass provisioning framework."""

from guestpass.core.directory_client import IdentityDirectoryClient
from guestpass.core.factory import GuestpassFactory, create_factory
from guestpass.core.guest_directory import GuestDirectory

__all__ = [
    "IdentityDirectoryClient",
    "GuestDirectory",
    "GuestpassFactory",
    "create_factory",
]
