"""
Configuration management and singleton pattern.

This module provides the main configuration loading interface, caching the
validated configuration so it is loaded only once per process.
"""

import logging
from pathlib import Path
from typing import Optional

from ..models.config import MonitorConfig
from ..validation import handle_config_error, ErrorSeverity
from .loader import load_main_config
from .validators import validate_monitor_config

logger = logging.getLogger(__name__)

# --- Global Singleton for Configuration ---

_CONFIG: Optional[MonitorConfig] = None

# Default location of the configuration file, relative to the source checkout.
# When this file is absent the built-in defaults are used.
DEFAULT_CONFIG_FILE_PATH = Path(__file__).parent.parent.parent.parent / "conf" / "config.toml"

_CONFIG_FILE_PATH = DEFAULT_CONFIG_FILE_PATH
# True once set_config_path() was called; an explicit file must exist.
_CONFIG_PATH_EXPLICIT = False


def set_config_path(config_path: Path) -> None:
    """
    Set a custom configuration file path.

    Unlike the default path, a file set here is required to exist when the
    configuration is loaded.

    Args:
        config_path: Path to a config.toml file
    """
    global _CONFIG_FILE_PATH, _CONFIG, _CONFIG_PATH_EXPLICIT
    _CONFIG_FILE_PATH = Path(config_path)
    _CONFIG_PATH_EXPLICIT = True
    _CONFIG = None
    logger.info(f"Configuration path set to: {config_path}")


def reset_config_path() -> None:
    """Go back to the default configuration path and drop the cache."""
    global _CONFIG_FILE_PATH, _CONFIG, _CONFIG_PATH_EXPLICIT
    _CONFIG_FILE_PATH = DEFAULT_CONFIG_FILE_PATH
    _CONFIG_PATH_EXPLICIT = False
    _CONFIG = None


def clear_config_cache() -> None:
    """
    Clear the cached configuration, forcing a reload on next access.
    """
    global _CONFIG
    _CONFIG = None
    logger.debug("Configuration cache cleared")


def _load_config(config_path: Path, required: bool) -> MonitorConfig:
    """
    Load and validate the configuration file.

    Args:
        config_path: Path to the config.toml file
        required: Whether a missing file is an error

    Returns:
        Validated MonitorConfig instance

    Raises:
        FileNotFoundError: If a required configuration file is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    if not required and not config_path.exists():
        logger.debug(f"No configuration file at {config_path}, using defaults")
        return validate_monitor_config({})

    try:
        monitor_data = load_main_config(config_path)
        monitor_config = validate_monitor_config(monitor_data)
        logger.info(f"Successfully loaded configuration from {config_path}")
        return monitor_config
    except FileNotFoundError as e:
        handle_config_error(
            error=e,
            context="loading configuration file",
            severity=ErrorSeverity.ERROR,
            reraise=True,
            logger=logger
        )
        raise
    except Exception as e:
        handle_config_error(
            error=e,
            context="processing configuration",
            severity=ErrorSeverity.ERROR,
            reraise=True,
            logger=logger
        )
        raise


def get_config() -> MonitorConfig:
    """
    Get the global monitor configuration, loading it if necessary.

    Returns:
        The singleton MonitorConfig instance

    Raises:
        FileNotFoundError: If an explicitly set configuration file is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _load_config(_CONFIG_FILE_PATH, required=_CONFIG_PATH_EXPLICIT)
    return _CONFIG


def is_config_loaded() -> bool:
    """
    Check if configuration has been loaded and cached.
    """
    return _CONFIG is not None


def get_config_info() -> dict:
    """
    Get information about the current configuration state.
    """
    return {
        "config_loaded": is_config_loaded(),
        "config_path": str(_CONFIG_FILE_PATH),
        "config_path_explicit": _CONFIG_PATH_EXPLICIT,
    }
