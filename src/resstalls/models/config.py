"""
Configuration data models.
"""

from dataclasses import dataclass

# Used as the default measurement duration; long enough to be unbounded in practice.
UNBOUNDED_DURATION_SECONDS = 999999999


@dataclass
class MonitorConfig:
    """
    Configuration for the monitor's behavior, loaded from `config.toml`.

    Every field has a default so the tool runs without any configuration file.
    """

    # [monitor.general]
    log_level: str = "WARNING"

    # [monitor.collection]
    perf_executable: str = "perf"
    interval_seconds: float = 1.0
    duration_seconds: float = UNBOUNDED_DURATION_SECONDS
    # Seconds to wait for the engine after SIGTERM before killing it.
    stop_timeout: float = 5.0

    # [monitor.report]
    # Number of data rows printed between two headers.
    header_interval: int = 25
    # Every counter value is divided by this before printing.
    value_divisor: int = 1000000
    column_width: int = 8
