"""Validated settings model built from the merged config dict."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from people_dao.config.defaults import (
    DEFAULT_CACHE_DISABLED,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_DB_PATH,
    DEFAULT_LOG_LEVEL,
    DEFAULT_SWEEP_INTERVAL_SECONDS,
)
from people_dao.config.hierarchy import load_config_hierarchy

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    db_path: str = DEFAULT_DB_PATH
    cache_ttl_seconds: float = Field(default=DEFAULT_CACHE_TTL_SECONDS, gt=0)
    cache_disabled: bool = DEFAULT_CACHE_DISABLED
    sweep_interval_seconds: float = Field(default=DEFAULT_SWEEP_INTERVAL_SECONDS, ge=0)
    log_level: str = DEFAULT_LOG_LEVEL

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(sorted(_LOG_LEVELS))}")
        return level


def load_settings(**runtime_overrides: Any) -> Settings:
    """Resolve the config hierarchy and validate it."""
    return Settings(**load_config_hierarchy(**runtime_overrides))
