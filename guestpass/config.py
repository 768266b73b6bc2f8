"""Configuration objects injected into directory clients and factories.

Values are passed explicitly at construction. The ``from_env`` helpers exist
for deployment entry points (e.g. the Lambda handler) and are the only place
environment variables are read.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_TIMEOUT = 10.0
DEFAULT_SCAN_PAGE_SIZE = 1000
DEFAULT_SCAN_MAX_PAGES = 10


def _require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ValueError(f"Missing required environment variable '{name}'")
    return value


@dataclass
class SupabaseConfig:
    """Connection settings for a Supabase project.

    Args:
        url: Project URL (e.g. https://abc.supabase.co)
        service_role_key: Service role key with admin rights on auth users
        timeout: HTTP request timeout in seconds
        guests_table: PostgREST table holding guest records, or None to run
            without a local guest directory
        guest_handle_column: Column of ``guests_table`` storing the auth user id
    """

    url: str
    service_role_key: str
    timeout: float = DEFAULT_TIMEOUT
    guests_table: Optional[str] = "guests"
    guest_handle_column: str = "auth_user_id"

    def __post_init__(self) -> None:
        if not self.url or not self.service_role_key:
            raise ValueError("SupabaseConfig requires both 'url' and 'service_role_key'")
        self.url = self.url.rstrip("/")

    @classmethod
    def from_env(cls) -> SupabaseConfig:
        return cls(
            url=_require_env("SUPABASE_URL"),
            service_role_key=_require_env("SUPABASE_SERVICE_ROLE_KEY"),
            timeout=float(os.getenv("GUESTPASS_HTTP_TIMEOUT", DEFAULT_TIMEOUT)),
            guests_table=os.getenv("GUESTPASS_GUESTS_TABLE", "guests") or None,
        )


@dataclass
class CognitoConfig:
    """Settings for an AWS Cognito user pool directory.

    Args:
        region: AWS region of the user pool
        user_pool_id: Cognito user pool holding guest accounts
        endpoint_url: Custom endpoint URL for LocalStack or other AWS-compatible services
        timeout: Connect and read timeout in seconds for every AWS call
        guest_table_name: Optional DynamoDB table mapping guest emails to handles
    """

    region: str
    user_pool_id: str
    endpoint_url: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    guest_table_name: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.region or not self.user_pool_id:
            raise ValueError("CognitoConfig requires both 'region' and 'user_pool_id'")

    @classmethod
    def from_env(cls) -> CognitoConfig:
        return cls(
            region=_require_env("AWS_REGION"),
            user_pool_id=_require_env("COGNITO_USER_POOL_ID"),
            endpoint_url=os.getenv("COGNITO_ENDPOINT_URL") or None,
            timeout=float(os.getenv("GUESTPASS_HTTP_TIMEOUT", DEFAULT_TIMEOUT)),
            guest_table_name=os.getenv("GUESTPASS_GUEST_TABLE") or None,
        )


@dataclass
class ResolutionConfig:
    """Bounds for the paginated account scan.

    The scan reads at most ``page_size * max_pages`` accounts.
    """

    page_size: int = DEFAULT_SCAN_PAGE_SIZE
    max_pages: int = DEFAULT_SCAN_MAX_PAGES

    def __post_init__(self) -> None:
        if self.page_size < 1 or self.max_pages < 1:
            raise ValueError("page_size and max_pages must both be at least 1")

    @classmethod
    def from_env(cls) -> ResolutionConfig:
        return cls(
            page_size=int(os.getenv("GUESTPASS_SCAN_PAGE_SIZE", DEFAULT_SCAN_PAGE_SIZE)),
            max_pages=int(os.getenv("GUESTPASS_SCAN_MAX_PAGES", DEFAULT_SCAN_MAX_PAGES)),
        )
