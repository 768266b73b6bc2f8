"""Abstract factory for creating guest provisioning components."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from guestpass.config import ResolutionConfig
from guestpass.core.directory_client import IdentityDirectoryClient
from guestpass.core.guest_directory import GuestDirectory


class GuestpassFactory(ABC):
    """Abstract factory for guest provisioning components.

    Provider-specific factories create the IdentityDirectoryClient and the
    optional GuestDirectory. The base class wires them into the EmailResolver
    chains, GuestProvisioner and PasswordResetter. Password reset trusts the
    guest directory hint; provisioning resolves against the directory only.

    Usage:
        Do not instantiate this class directly. Use create_factory() instead:

        >>> from guestpass import create_factory
        >>> factory = create_factory("supabase", config=SupabaseConfig.from_env())
        >>> handle = await factory.create_provisioner().provision(...)

    See Also:
        - create_factory(): Main entry point for creating factories
        - SupabaseFactory: Supabase Auth implementation
        - CognitoFactory: AWS Cognito implementation
        - MockFactory: Mock implementation for testing
    """

    def __init__(self, resolution: Optional[ResolutionConfig] = None):
        self.resolution = resolution or ResolutionConfig()
        self._resolver = None
        self._directory_resolver = None
        self._provisioner = None
        self._resetter = None

    @abstractmethod
    def create_directory_client(self) -> IdentityDirectoryClient:
        """Create or return the cached identity directory client."""

    @abstractmethod
    def create_guest_directory(self) -> Optional[GuestDirectory]:
        """Create or return the cached guest directory.

        Returns:
            GuestDirectory, or None when no local system of record is configured
        """

    def create_resolver(self):
        """Create or return the cached cache -> query -> scan resolver."""
        if self._resolver is None:
            from guestpass.resolution import EmailResolver

            self._resolver = EmailResolver.build(
                self.create_directory_client(),
                guest_directory=self.create_guest_directory(),
                config=self.resolution,
            )
        return self._resolver

    def create_directory_resolver(self):
        """Create or return the cached query -> scan resolver.

        Skips the guest directory, so every handle it returns was matched
        against the identity directory's own email.
        """
        if self._directory_resolver is None:
            from guestpass.resolution import EmailResolver

            self._directory_resolver = EmailResolver.for_directory(
                self.create_directory_client(),
                config=self.resolution,
            )
        return self._directory_resolver

    def create_provisioner(self):
        """Create or return the cached GuestProvisioner.

        Conflicts are resolved against the directory only; a guest directory
        hint is never allowed to pick the account that gets overwritten.
        """
        if self._provisioner is None:
            from guestpass.provisioner import GuestProvisioner

            self._provisioner = GuestProvisioner(
                self.create_directory_client(),
                self.create_directory_resolver(),
            )
        return self._provisioner

    def create_password_resetter(self):
        """Create or return the cached PasswordResetter."""
        if self._resetter is None:
            from guestpass.password_resetter import PasswordResetter

            self._resetter = PasswordResetter(
                self.create_directory_client(),
                self.create_resolver(),
            )
        return self._resetter


def create_factory(provider_type: str, **kwargs) -> GuestpassFactory:
    """Create a factory for the specified directory provider.

    Args:
        provider_type: The identity directory type to use.
            Valid values: "supabase", "cognito", "mock"

        **kwargs: Provider-specific configuration arguments.

            For provider_type="supabase":
                config (SupabaseConfig, required): Project URL and service role key.
                resolution (ResolutionConfig, optional): Scan page size and ceiling.
                guest_directory (GuestDirectory, optional): Overrides the guests
                    table directory built from the config.

            For provider_type="cognito":
                config (CognitoConfig, required): Region and user pool.
                resolution (ResolutionConfig, optional): Scan page size and ceiling.
                guest_directory (GuestDirectory, optional): Overrides the DynamoDB
                    directory built from config.guest_table_name.

            For provider_type="mock":
                client (MockDirectoryClient, optional)
                guest_directory (GuestDirectory, optional)
                resolution (ResolutionConfig, optional)

    Returns:
        GuestpassFactory: A configured factory instance.

    Raises:
        ValueError: If provider_type is unknown or required arguments are missing.

    Examples:
        With environment variables:
            >>> import os
            >>> factory = create_factory(
            ...     os.getenv("GUESTPASS_PROVIDER", "supabase"),
            ...     config=SupabaseConfig.from_env(),
            ... )

        Using mock provider for testing:
            >>> factory = create_factory("mock")
            >>> provisioner = factory.create_provisioner()
    """
    if provider_type == "supabase":
        from guestpass.factories.supabase import SupabaseFactory

        if "config" not in kwargs:
            raise ValueError(
                "Missing required argument 'config' for provider_type='supabase'. "
                "Example: create_factory('supabase', config=SupabaseConfig.from_env())"
            )
        return SupabaseFactory(**kwargs)
    elif provider_type == "cognito":
        from guestpass.factories.cognito import CognitoFactory

        if "config" not in kwargs:
            raise ValueError(
                "Missing required argument 'config' for provider_type='cognito'. "
                "Example: create_factory('cognito', config=CognitoConfig.from_env())"
            )
        return CognitoFactory(**kwargs)
    elif provider_type == "mock":
        from guestpass.factories.mock import MockFactory

        return MockFactory(**kwargs)
    else:
        raise ValueError(
            f"Unknown provider type: '{provider_type}'. "
            f"Valid types: 'supabase', 'cognito', 'mock'. "
            f"Example: create_factory('supabase', config=SupabaseConfig.from_env())"
        )
