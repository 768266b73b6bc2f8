"""Guestpass - idempotent guest account provisioning for identity directories.

Guestpass keeps exactly one identity directory account per guest email for
an event-management application, with support for Supabase Auth and AWS
Cognito out of the box.

Features:
- Create-or-update guest provisioning (last write wins, never duplicates)
- Password reset by email (never creates accounts)
- Email resolution via guest directory hint, direct query, and bounded scan
- HTTP/Lambda request handlers with status code translation
"""

from guestpass.config import CognitoConfig, ResolutionConfig, SupabaseConfig
from guestpass.core.directory_client import IdentityDirectoryClient
from guestpass.core.factory import GuestpassFactory, create_factory
from guestpass.core.guest_directory import GuestDirectory
from guestpass.directory_clients import (
    CognitoDirectoryClient,
    MockDirectoryClient,
    SupabaseDirectoryClient,
)
from guestpass.exceptions import (
    AccountNotFoundError,
    DirectoryError,
    GuestDirectoryError,
    GuestpassError,
    MissingInputError,
)
from guestpass.factories import CognitoFactory, MockFactory, SupabaseFactory
from guestpass.guest_directories import (
    DynamoDBGuestDirectory,
    MockGuestDirectory,
    SupabaseGuestDirectory,
)
from guestpass.handlers import HandlerResponse, handle_password_reset, handle_provision
from guestpass.models import (
    AccountPage,
    CreateOutcome,
    CreateStatus,
    GuestProfile,
    IdentityRecord,
    Resolution,
    ResolutionStatus,
    normalize_email,
)
from guestpass.password_resetter import PasswordResetter
from guestpass.provisioner import GuestProvisioner
from guestpass.resolution import (
    CachedHandleStrategy,
    DirectQueryStrategy,
    EmailResolver,
    PaginatedScanStrategy,
    ResolutionStrategy,
)

__version__ = "0.1.0"

__all__ = [
    # Core interfaces
    "IdentityDirectoryClient",
    "GuestDirectory",
    # Factory (recommended entry point)
    "create_factory",
    "GuestpassFactory",
    "SupabaseFactory",
    "CognitoFactory",
    "MockFactory",
    # Operations
    "GuestProvisioner",
    "PasswordResetter",
    # Request handlers
    "HandlerResponse",
    "handle_provision",
    "handle_password_reset",
    # Resolution
    "EmailResolver",
    "ResolutionStrategy",
    "CachedHandleStrategy",
    "DirectQueryStrategy",
    "PaginatedScanStrategy",
    # Configuration
    "SupabaseConfig",
    "CognitoConfig",
    "ResolutionConfig",
    # Models
    "AccountPage",
    "CreateOutcome",
    "CreateStatus",
    "GuestProfile",
    "IdentityRecord",
    "Resolution",
    "ResolutionStatus",
    "normalize_email",
    # Exceptions
    "GuestpassError",
    "MissingInputError",
    "AccountNotFoundError",
    "DirectoryError",
    "GuestDirectoryError",
    # Directory clients
    "SupabaseDirectoryClient",
    "CognitoDirectoryClient",
    "MockDirectoryClient",
    # Guest directories
    "SupabaseGuestDirectory",
    "DynamoDBGuestDirectory",
    "MockGuestDirectory",
]
