"""
resstalls: CPU resource stall monitor.

Samples the Intel RESOURCE_STALLS performance counters through `perf stat`
at a fixed interval and prints a periodic table of stall cycles by cause,
for the whole system, a single CPU, a single process or a single command.

The package is organized into specialized modules:
- config: Configuration loading and validation
- models: Data structures and type definitions
- validation: Exceptions, input validation and error handling
- system: Scope resolution and system checks
- collectors: The stall event set, the perf adapter and the interval aggregator
- report: Fixed-width report rendering
- cli: Command-line interface and orchestration

Usage:
    From command line:
        resstalls [-C CPU | -p PID | -c CMD] [interval [duration]]

    Programmatically:
        from resstalls import StallMonitor, get_config, resolve_scope
        scope = resolve_scope(cpu=0, interval_seconds=1, duration_seconds=10)
        StallMonitor(scope, get_config()).run()
"""

from .config import clear_config_cache, get_config, set_config_path
from .cli import main_cli
from .cli.orchestrator import StallMonitor

from .collectors import (
    EVENT_KEYS,
    TRIGGER_EVENT,
    IntervalAggregator,
    PerfStatCollector,
)
from .models import (
    AggregatedRecord,
    MonitorConfig,
    MonitorScope,
    ScopeKind,
)
from .report import ReportRenderer
from .system import check_perf_installed, resolve_scope
from .validation import (
    AmbiguousScopeError,
    TargetNotFoundError,
    UnsupportedEventError,
    ValidationError,
)

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "main_cli",
    "StallMonitor",
    # Pipeline
    "EVENT_KEYS",
    "TRIGGER_EVENT",
    "IntervalAggregator",
    "PerfStatCollector",
    "ReportRenderer",
    "resolve_scope",
    "check_perf_installed",
    # Models
    "AggregatedRecord",
    "MonitorConfig",
    "MonitorScope",
    "ScopeKind",
    # Errors
    "AmbiguousScopeError",
    "TargetNotFoundError",
    "UnsupportedEventError",
    "ValidationError",
]
