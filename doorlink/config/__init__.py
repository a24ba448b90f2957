"""
Configuration module for doorlink.

Usage:
    from doorlink.config import get_config

    config = get_config()
    logger.info("Project configured", root=str(config.project.root))
"""

import sys
import threading
from functools import lru_cache
from os import getenv

from pydantic import ValidationError

from ..exceptions import ConfigurationError
from .models import AppConfig

__all__ = ["get_config", "reset_config", "AppConfig"]

_config_instance: AppConfig | None = None
_config_lock = threading.Lock()


def _is_test_mode() -> bool:
    """Detect if running under pytest."""
    if "pytest" in sys.modules:
        return True
    return bool(getenv("PYTEST_CURRENT_TEST"))


def _create_config_instance() -> AppConfig:
    """Create a new AppConfig from the current environment."""
    try:
        return AppConfig()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid doorlink configuration: {e}", details={"errors": e.errors()}) from e


@lru_cache(maxsize=1)
def _get_config_cached() -> AppConfig:
    """Production config loader with caching."""
    global _config_instance  # pylint: disable=global-statement
    with _config_lock:
        if _config_instance is None:
            _config_instance = _create_config_instance()
    return _config_instance


def get_config() -> AppConfig:
    """
    Get application configuration (singleton in production, fresh in tests).

    Returns:
        AppConfig: The application configuration

    Raises:
        ConfigurationError: If configuration values are invalid
    """
    if _is_test_mode():
        return _create_config_instance()
    return _get_config_cached()


def reset_config() -> None:
    """Reset the configuration cache to force a reload."""
    global _config_instance  # pylint: disable=global-statement
    with _config_lock:
        _config_instance = None
        _get_config_cached.cache_clear()
