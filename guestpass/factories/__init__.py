"""Factory implementations for creating guestpass components."""

from guestpass.factories.cognito import CognitoFactory
from guestpass.factories.mock import MockFactory
from guestpass.factories.supabase import SupabaseFactory

__all__ = [
    "CognitoFactory",
    "MockFactory",
    "SupabaseFactory",
]
