"""Package-level default configuration values."""

from __future__ import annotations

from pathlib import Path
from typing import Any

# Storage
DEFAULT_DB_PATH = str(Path.home() / ".people_dao" / "people.db")

# Cache
DEFAULT_CACHE_TTL_SECONDS = 60.0
DEFAULT_CACHE_DISABLED = False
DEFAULT_SWEEP_INTERVAL_SECONDS = 0.0  # 0 = no background sweeper

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "db_path": DEFAULT_DB_PATH,
        "cache_ttl_seconds": DEFAULT_CACHE_TTL_SECONDS,
        "cache_disabled": DEFAULT_CACHE_DISABLED,
        "sweep_interval_seconds": DEFAULT_SWEEP_INTERVAL_SECONDS,
        "log_level": DEFAULT_LOG_LEVEL,
    }
