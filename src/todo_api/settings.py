from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: root logging level name (default: INFO)
    - DEFAULT_PAGE_SIZE: page size used when 'limit' is missing or invalid (default: 10)
    - MAX_PAGE_SIZE: upper bound applied to 'limit' on list endpoints (default: 1000)
    """

    cors_allow_origins: List[str]
    log_level: str
    default_page_size: int
    max_page_size: int


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_positive_int(value: str, default: int) -> int:
    try:
        parsed = int(value.strip(), 10)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        # Star will be handled in main via allow_origins=["*"]
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    origins = _parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*"))
    log_level = _get_env("LOG_LEVEL", "INFO").strip().upper()

    default_page_size = _parse_positive_int(_get_env("DEFAULT_PAGE_SIZE", "10"), 10)
    max_page_size = _parse_positive_int(_get_env("MAX_PAGE_SIZE", "1000"), 1000)
    if default_page_size > max_page_size:
        default_page_size = max_page_size

    return Settings(
        cors_allow_origins=origins,
        log_level=log_level,
        default_page_size=default_page_size,
        max_page_size=max_page_size,
    )
