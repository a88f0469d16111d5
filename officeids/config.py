"""Configuration for office identifier allocation.

Module-level constants describe the fixed CCccNNN format. Runtime knobs
(retry budget, batch concurrency, record store location) come from the
environment through ``Settings.from_env()``.

Environment variables:
    OFFICEIDS_MAX_RETRIES: retries per city-code candidate (default 10)
    OFFICEIDS_MAX_CONCURRENT: batch concurrency (default 5)
    OFFICEIDS_STATS_TTL: statistics cache lifetime in seconds (default 300)
    FIRESTORE_PROJECT_ID: project hosting the offices collection
    FIRESTORE_API_KEY: API key for the Firestore REST endpoint
    FIRESTORE_COLLECTION: collection holding office records (default "offices")
"""

import os
from dataclasses import dataclass
from typing import Optional

# ============================================================================
# Identifier format
# ============================================================================

ID_FORMAT = "CCccNNN"
ID_LENGTH = 7

NUMBER_MIN = 100
NUMBER_MAX = 999
NUMBERS_PER_PREFIX = NUMBER_MAX - NUMBER_MIN + 1  # 900

# ============================================================================
# Defaults
# ============================================================================

DEFAULT_MAX_RETRIES = 10
DEFAULT_MAX_CONCURRENT = 5
DEFAULT_MAX_SUGGESTIONS = 5
STATS_CACHE_TTL_SECONDS = 300

OFFICES_COLLECTION = "offices"
FIRESTORE_BASE_URL = "https://firestore.googleapis.com/v1"
REQUEST_TIMEOUT_SECONDS = 10
LIST_PAGE_SIZE = 300

TRANSIENT_STATUS_CODES = {408, 429, 500, 502, 503, 504}


def _int_from_env(name: str, default: int, minimum: int = 1) -> int:
    """Read a positive integer from the environment."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the allocation service."""

    max_retries: int = DEFAULT_MAX_RETRIES
    max_concurrent: int = DEFAULT_MAX_CONCURRENT
    stats_cache_ttl: int = STATS_CACHE_TTL_SECONDS
    firestore_project_id: Optional[str] = None
    firestore_api_key: Optional[str] = None
    collection: str = OFFICES_COLLECTION

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from OFFICEIDS_* and FIRESTORE_* variables."""
        return cls(
            max_retries=_int_from_env("OFFICEIDS_MAX_RETRIES", DEFAULT_MAX_RETRIES),
            max_concurrent=_int_from_env("OFFICEIDS_MAX_CONCURRENT", DEFAULT_MAX_CONCURRENT),
            stats_cache_ttl=_int_from_env("OFFICEIDS_STATS_TTL", STATS_CACHE_TTL_SECONDS, minimum=0),
            firestore_project_id=os.getenv("FIRESTORE_PROJECT_ID"),
            firestore_api_key=os.getenv("FIRESTORE_API_KEY"),
            collection=os.getenv("FIRESTORE_COLLECTION") or OFFICES_COLLECTION,
        )
