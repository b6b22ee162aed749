"""Configuration schema registry.

Defines all valid configuration keys with their types and validation rules.
This is the single source of truth for configuration structure.
"""

from __future__ import annotations

from .types import ConfigKey, ConfigType

# =============================================================================
# CONFIGURATION SCHEMA REGISTRY
#
# All configuration keys must be defined here. Unknown keys will be rejected.
# =============================================================================

CONFIG_SCHEMA: dict[str, ConfigKey] = {
    # =========================================================================
    # RANDOM STRATEGY
    # =========================================================================
    "engine.random.seed": ConfigKey(
        key="engine.random.seed",
        config_type=ConfigType.INT,
        required=True,
        description="Seed for the RANDOM strategy shuffle when the request has none",
        default=42,
        min_value=0,
    ),
    # =========================================================================
    # NIGHTS
    # =========================================================================
    "engine.night.schedule_type": ConfigKey(
        key="engine.night.schedule_type",
        config_type=ConfigType.STRING,
        required=True,
        description="Schedule type treated as a sleeping slot",
        default="SLEEP",
        allowed_values=["BREAKFAST", "LUNCH", "DINNER", "SLEEP"],
    ),
    # =========================================================================
    # DIAGNOSTICS
    # =========================================================================
    "engine.debug.enabled": ConfigKey(
        key="engine.debug.enabled",
        config_type=ConfigType.BOOL,
        required=False,
        description="Record every placement decision in the run log",
        default=False,
    ),
    "engine.log_dir": ConfigKey(
        key="engine.log_dir",
        config_type=ConfigType.STRING,
        required=False,
        description="Directory for saved run logs",
        default="logs/engine",
        validator=lambda v: bool(v.strip()),
    ),
}


def get_all_required_keys() -> list[str]:
    """Get all required configuration keys."""
    return [k for k, v in CONFIG_SCHEMA.items() if v.required]
