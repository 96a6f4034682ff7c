"""Configuration for the mockbase test double."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_BASE_URL = "https://test.supabase.co"

_TRUTHY = ("1", "true", "yes", "on")


@dataclass
class MockbaseConfig:
    """Configuration for one mock backend bundle."""

    base_url: str = DEFAULT_BASE_URL
    id_prefix: str = "mock"
    session_ttl_s: int = 3600
    strict_operations: bool = False
    validate_writes: bool = False
    oauth_providers: tuple[str, ...] = ("google", "apple")

    @classmethod
    def from_env(cls) -> MockbaseConfig:
        """Build a config from MOCKBASE_* / Supabase environment variables."""
        base_url = (
            os.getenv("MOCKBASE_URL")
            or os.getenv("SUPABASE_URL")
            or os.getenv("NEXT_PUBLIC_SUPABASE_URL")
            or DEFAULT_BASE_URL
        )
        return cls(
            base_url=base_url.rstrip("/"),
            strict_operations=_env_flag("MOCKBASE_STRICT"),
            validate_writes=_env_flag("MOCKBASE_VALIDATE_WRITES"),
        )


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in _TRUTHY
