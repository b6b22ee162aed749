"""
Unified configuration management for the dormitory engine.

Fast-fail, schema-driven configuration. Values come from explicit overrides,
then environment variables, then schema defaults.

Usage:
    from dormitory.config import ConfigLoader, ConfigError

    # Initialize at application startup
    ConfigLoader.initialize()

    # Get singleton instance
    config = ConfigLoader.get_instance()

    # Typed accessors
    seed = config.get_int("engine.random.seed")
    debug = config.get_bool("engine.debug.enabled")
"""

from __future__ import annotations

from .errors import (
    ConfigError,
    MissingKeyError,
    UnknownKeyError,
    ValidationError,
)
from .loader import ConfigLoader
from .schema import CONFIG_SCHEMA, get_all_required_keys
from .types import ConfigKey, ConfigType

__all__ = [
    # Main loader
    "ConfigLoader",
    # Error classes
    "ConfigError",
    "MissingKeyError",
    "ValidationError",
    "UnknownKeyError",
    # Schema
    "CONFIG_SCHEMA",
    "ConfigKey",
    "ConfigType",
    "get_all_required_keys",
]
