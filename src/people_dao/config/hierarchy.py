"""Configuration hierarchy — merges sources in priority order.

Precedence (later overrides earlier):
  1. Package defaults
  2. Global config   (~/.people_dao/config.yaml)
  3. Project config   (./people_dao.yaml, searched from cwd upward)
  4. Environment variables (PEOPLE_DAO_*)
  5. Runtime arguments

An environment value that does not parse, or is out of range, is logged and
skipped so the layer below it stays in effect.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml

from people_dao.config.defaults import get_defaults

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".people_dao" / "config.yaml"
_PROJECT_CONFIG_NAME = "people_dao.yaml"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def _flag(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ValueError(f"expected one of {', '.join(sorted(_TRUTHY | _FALSY - {''}))}")


def _positive_seconds(value: str) -> float:
    seconds = float(value)
    if not seconds > 0:
        raise ValueError("must be greater than 0")
    return seconds


def _non_negative_seconds(value: str) -> float:
    seconds = float(value)
    if not seconds >= 0:
        raise ValueError("must be 0 or greater")
    return seconds


def _path(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be empty")
    return str(Path(value).expanduser())


# env var -> (config key, parser)
_ENV_MAP: dict[str, tuple[str, Callable[[str], Any]]] = {
    "PEOPLE_DAO_DB_PATH": ("db_path", _path),
    "PEOPLE_DAO_CACHE_TTL": ("cache_ttl_seconds", _positive_seconds),
    "PEOPLE_DAO_CACHE_DISABLED": ("cache_disabled", _flag),
    "PEOPLE_DAO_SWEEP_INTERVAL": ("sweep_interval_seconds", _non_negative_seconds),
    "PEOPLE_DAO_LOG_LEVEL": ("log_level", str.upper),
}


def load_config_hierarchy(**runtime_overrides: Any) -> dict[str, Any]:
    """Load and merge configuration from all sources.

    Returns a merged dict with the final resolved values.
    """
    config = get_defaults()

    global_cfg = _load_yaml_config(_GLOBAL_CONFIG_PATH)
    if global_cfg:
        config.update(global_cfg)

    project_path = _find_project_config()
    if project_path:
        project_cfg = _load_yaml_config(project_path)
        if project_cfg:
            config.update(project_cfg)

    config.update(_load_env_vars())

    for key, value in runtime_overrides.items():
        if value is not None:
            config[key] = value

    return config


def _load_yaml_config(path: Path) -> dict[str, Any] | None:
    """Load a YAML config file if it exists. Unknown keys are reported, not fatal."""
    if not path.exists() or not path.is_file():
        return None
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, ignoring", path)
        return None

    unknown = sorted(set(data) - set(get_defaults()))
    if unknown:
        logger.warning("Unknown keys in %s ignored: %s", path, ", ".join(map(str, unknown)))
    return {key: value for key, value in data.items() if key not in unknown}


def _find_project_config() -> Path | None:
    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / _PROJECT_CONFIG_NAME
        if candidate.exists():
            return candidate
    return None


def _load_env_vars() -> dict[str, Any]:
    result: dict[str, Any] = {}
    for env_key, (config_key, parse) in _ENV_MAP.items():
        raw = os.environ.get(env_key)
        if raw is None:
            continue
        try:
            result[config_key] = parse(raw)
        except ValueError as e:
            logger.warning("Ignoring %s=%r: %s", env_key, raw, e)
    return result
