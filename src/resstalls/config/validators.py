"""
Configuration validation utilities.

Turns the raw ``[monitor]`` table into a validated MonitorConfig.
"""

import logging
from typing import Any, Dict

from ..models.config import UNBOUNDED_DURATION_SECONDS, MonitorConfig
from ..validation import (
    ValidationError,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
    validate_simple_command,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# perf refuses intervals below 10ms
MIN_INTERVAL_SECONDS = 0.01
MAX_INTERVAL_SECONDS = 3600.0


def _section(monitor_data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = monitor_data.get(name, {})
    if not isinstance(section, dict):
        raise ValidationError(
            f"monitor.{name} must be a table",
            field_name=f"monitor.{name}",
            value=section,
        )
    return section


def validate_monitor_config(monitor_data: Dict[str, Any]) -> MonitorConfig:
    """
    Validate and create a MonitorConfig from raw configuration data.

    Missing sections and keys fall back to the MonitorConfig defaults.

    Args:
        monitor_data: Raw monitor configuration from TOML

    Returns:
        Validated MonitorConfig instance

    Raises:
        ValidationError: If validation fails
    """
    general_settings = _section(monitor_data, "general")
    collection_settings = _section(monitor_data, "collection")
    report_settings = _section(monitor_data, "report")

    log_level = validate_enum_choice(
        general_settings.get("log_level", "WARNING"),
        choices=LOG_LEVELS,
        field_name="monitor.general.log_level",
        case_sensitive=False,
    )

    perf_executable = validate_simple_command(
        collection_settings.get("perf_executable", "perf"),
        field_name="monitor.collection.perf_executable",
    )

    interval_seconds = validate_positive_float(
        collection_settings.get("interval_seconds", 1.0),
        min_value=MIN_INTERVAL_SECONDS,
        max_value=MAX_INTERVAL_SECONDS,
        field_name="monitor.collection.interval_seconds",
    )

    duration_seconds = validate_positive_float(
        collection_settings.get("duration_seconds", UNBOUNDED_DURATION_SECONDS),
        min_value=MIN_INTERVAL_SECONDS,
        max_value=UNBOUNDED_DURATION_SECONDS,
        field_name="monitor.collection.duration_seconds",
    )

    stop_timeout = validate_positive_float(
        collection_settings.get("stop_timeout", 5.0),
        min_value=0.1,
        max_value=60.0,
        field_name="monitor.collection.stop_timeout",
    )

    header_interval = validate_positive_integer(
        report_settings.get("header_interval", 25),
        min_value=1,
        field_name="monitor.report.header_interval",
    )

    value_divisor = validate_positive_integer(
        report_settings.get("value_divisor", 1000000),
        min_value=1,
        field_name="monitor.report.value_divisor",
    )

    column_width = validate_positive_integer(
        report_settings.get("column_width", 8),
        min_value=4,
        max_value=32,
        field_name="monitor.report.column_width",
    )

    if interval_seconds > duration_seconds:
        logger.warning(
            f"monitor.collection.interval_seconds ({interval_seconds}) is longer than "
            f"duration_seconds ({duration_seconds}); no interval may complete"
        )

    return MonitorConfig(
        log_level=log_level,
        perf_executable=perf_executable,
        interval_seconds=interval_seconds,
        duration_seconds=duration_seconds,
        stop_timeout=stop_timeout,
        header_interval=header_interval,
        value_divisor=value_divisor,
        column_width=column_width,
    )
