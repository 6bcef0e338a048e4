"""Layered configuration: defaults, YAML files, environment, runtime."""

from people_dao.config.hierarchy import load_config_hierarchy
from people_dao.config.schema import Settings, load_settings

__all__ = ["Settings", "load_config_hierarchy", "load_settings"]
