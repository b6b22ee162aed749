"""
Root test configuration and fixtures for the dormitory project.

This conftest.py provides common fixtures for all test categories:
- unit/: Fast, isolated unit tests

Note: sys.path manipulation is handled here to ensure imports work correctly.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Add project root to path to allow imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dormitory.config import ConfigLoader  # noqa: E402
from dormitory.config.loader import ENV_PREFIX  # noqa: E402


@pytest.fixture(autouse=True)
def isolate_engine_environment(monkeypatch: pytest.MonkeyPatch):
    """Drop DORMITORY_* variables so schema defaults apply unless a test sets them."""
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name)
    yield


@pytest.fixture(autouse=True)
def reset_config_singleton():
    """Reset ConfigLoader singleton between tests."""
    yield
    # Reset after each test to prevent state leakage
    ConfigLoader.reset()


@pytest.fixture
def default_config() -> ConfigLoader:
    """A loader with no overrides (schema defaults)."""
    return ConfigLoader()
