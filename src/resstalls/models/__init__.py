"""
Data models for the stall monitor.

Configuration Models:
- Monitor-wide settings loaded from TOML

Runtime Models:
- The resolved measurement scope handed to the sampling engine

Result Models:
- Parsed counter readings, per-interval aggregated records and
  aggregation statistics
"""

# Configuration models
from .config import UNBOUNDED_DURATION_SECONDS, MonitorConfig

# Runtime models
from .runtime import MonitorScope, ScopeKind

# Result models
from .results import AggregatedRecord, AggregatorStats, CounterReading

__all__ = [
    # Configuration
    "MonitorConfig",
    "UNBOUNDED_DURATION_SECONDS",
    # Runtime
    "MonitorScope",
    "ScopeKind",
    # Results
    "AggregatedRecord",
    "AggregatorStats",
    "CounterReading",
]
