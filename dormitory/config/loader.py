"""
ConfigLoader - Unified fast-fail configuration management.

Resolves configuration from explicit overrides, environment variables and
schema defaults, in that order. Every value is type-converted and validated
against CONFIG_SCHEMA; unknown keys and invalid values fail immediately.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, cast

from .errors import (
    ConfigError,
    MissingKeyError,
    UnknownKeyError,
    ValidationError,
)
from .schema import CONFIG_SCHEMA, get_all_required_keys
from .types import ConfigType

logger = logging.getLogger(__name__)

ENV_PREFIX = "DORMITORY_"


class ConfigLoader:
    """
    Unified configuration loader with fast-fail behavior.

    Usage:
        # Initialize at application startup (validates all required keys)
        ConfigLoader.initialize()

        # Get singleton instance
        loader = ConfigLoader.get_instance()

        # Typed accessors
        seed = loader.get_int("engine.random.seed")

        # Test substitution
        with ConfigLoader.use(ConfigLoader(overrides={"engine.random.seed": 7})):
            # Tests run with the substitute
            pass
    """

    _instance: ConfigLoader | None = None
    _initialized: bool = False

    def __init__(self, overrides: Mapping[str, Any] | None = None):
        """
        Initialize the config loader.

        Args:
            overrides: Values that take precedence over environment and defaults.

        Raises:
            UnknownKeyError: If an override names a key outside the schema
        """
        self._overrides: dict[str, Any] = {}
        for key, value in (overrides or {}).items():
            if key not in CONFIG_SCHEMA:
                raise UnknownKeyError(f"Unknown config key in overrides: '{key}'")
            self._overrides[key] = value
        self._validated = False

    @classmethod
    def initialize(
        cls,
        overrides: Mapping[str, Any] | None = None,
        validate_on_init: bool = True,
    ) -> ConfigLoader:
        """
        Initialize the singleton ConfigLoader.

        Args:
            overrides: Explicit values (highest priority)
            validate_on_init: If True, validates all required keys resolve

        Returns:
            The initialized ConfigLoader instance

        Raises:
            ConfigError: If required keys are missing or invalid
        """
        if cls._initialized:
            logger.debug("ConfigLoader already initialized, returning existing instance")
            return cls._instance  # type: ignore

        instance = cls(overrides=overrides)

        if validate_on_init:
            instance._validate_all_required_keys()

        cls._instance = instance
        cls._initialized = True
        logger.info("ConfigLoader initialized successfully")
        return instance

    @classmethod
    def get_instance(cls) -> ConfigLoader:
        """
        Get the singleton instance, auto-initializing with defaults if needed.
        """
        if not cls._initialized or cls._instance is None:
            logger.debug("ConfigLoader auto-initializing (no explicit initialize() call)")
            return cls.initialize(validate_on_init=False)
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset singleton state. For testing only."""
        cls._instance = None
        cls._initialized = False

    @classmethod
    @contextmanager
    def use(cls, loader: ConfigLoader) -> Iterator[None]:
        """
        Temporarily replace the singleton with a custom loader.

        Args:
            loader: The loader to use temporarily.
        """
        original = cls._instance
        original_initialized = cls._initialized
        cls._instance = loader
        cls._initialized = True
        try:
            yield
        finally:
            cls._instance = original
            cls._initialized = original_initialized

    def _validate_all_required_keys(self) -> None:
        """
        Validate all required config keys resolve to valid values.

        Raises:
            ConfigError: If any required keys are missing or invalid
        """
        missing_keys: list[str] = []
        invalid_values: list[str] = []

        required_keys = get_all_required_keys()

        for key in required_keys:
            try:
                self.get(key)
            except MissingKeyError:
                missing_keys.append(key)
            except ValidationError as e:
                invalid_values.append(f"{key}: {e}")

        if missing_keys or invalid_values:
            error_parts = []
            if missing_keys:
                error_parts.append(f"Missing required keys ({len(missing_keys)}): {missing_keys}")
            if invalid_values:
                error_parts.append(f"Invalid values ({len(invalid_values)}): {invalid_values}")

            raise ConfigError("Configuration validation failed.\n" + "\n".join(error_parts))

        self._validated = True
        logger.info(f"Validated {len(required_keys)} required config keys")

    def _get_env_key(self, key: str) -> str:
        """Convert dot notation to environment variable name."""
        # engine.random.seed -> DORMITORY_ENGINE_RANDOM_SEED
        return ENV_PREFIX + key.upper().replace(".", "_")

    def get(self, key: str) -> Any:
        """
        Get a configuration value.

        Args:
            key: Configuration key (e.g., "engine.random.seed")

        Returns:
            The typed configuration value, or None for an unset optional key

        Raises:
            UnknownKeyError: If key is not in schema
            MissingKeyError: If a required key resolves to nothing
            ValidationError: If value fails conversion or validation
        """
        if key not in CONFIG_SCHEMA:
            raise UnknownKeyError(f"Unknown config key: '{key}'")

        schema = CONFIG_SCHEMA[key]

        if key in self._overrides:
            raw_value, source = self._overrides[key], "override"
        elif (env_value := os.environ.get(self._get_env_key(key))) is not None:
            raw_value, source = env_value, f"environment variable {self._get_env_key(key)}"
        else:
            raw_value, source = schema.default, "schema default"

        if raw_value is None:
            if schema.required:
                raise MissingKeyError(f"Required config key '{key}' has no value (set {self._get_env_key(key)})")
            return None

        try:
            typed_value = self._convert_type(raw_value, schema.config_type)
        except (ValueError, TypeError) as e:
            raise ValidationError(f"Config key '{key}' from {source} has invalid type: {e}") from e

        error = schema.validate(typed_value)
        if error:
            raise ValidationError(f"Config key '{key}' from {source}: {error}")

        return typed_value

    def get_int(self, key: str, default: int | None = None) -> int:
        """Get an integer config value."""
        try:
            value = self.get(key)
        except (MissingKeyError, UnknownKeyError):
            if default is not None:
                return default
            raise
        return cast(int, value if value is not None else default)

    def get_bool(self, key: str, default: bool | None = None) -> bool:
        """Get a boolean config value."""
        try:
            value = self.get(key)
        except (MissingKeyError, UnknownKeyError):
            if default is not None:
                return default
            raise
        return cast(bool, value if value is not None else bool(default))

    def get_str(self, key: str, default: str | None = None) -> str:
        """Get a string config value."""
        try:
            value = self.get(key)
        except (MissingKeyError, UnknownKeyError):
            if default is not None:
                return default
            raise
        return cast(str, value if value is not None else default)

    def _convert_type(self, value: Any, config_type: ConfigType) -> Any:
        """Convert a raw value to the specified type."""
        if config_type == ConfigType.INT:
            if isinstance(value, bool):
                raise TypeError("boolean is not an integer")
            return int(value)
        elif config_type == ConfigType.BOOL:
            if isinstance(value, bool):
                return value
            if isinstance(value, str):
                return value.lower() in ("true", "1", "yes", "on")
            return bool(value)
        elif config_type == ConfigType.STRING:
            return str(value)
        else:
            return value

    def as_dict(self) -> dict[str, Any]:
        """Resolved values for every schema key (for run logs)."""
        return {key: self.get(key) for key in CONFIG_SCHEMA}
