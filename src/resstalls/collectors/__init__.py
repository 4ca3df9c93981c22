"""
Counter collection: the stall event set, the `perf stat` adapter and the
interval aggregator that rebuilds per-interval records from its output.
"""

from .aggregator import IntervalAggregator, IntervalTuple, parse_counter_line
from .base import AbstractCounterCollector
from .events import (
    CATEGORY_EVENTS,
    EVENT_KEYS,
    REPORT_COLUMNS,
    STALL_EVENTS,
    TOTAL_EVENT,
    TRIGGER_EVENT,
    StallEvent,
)
from .perf_stat import PerfStatCollector

__all__ = [
    "AbstractCounterCollector",
    "PerfStatCollector",
    "IntervalAggregator",
    "IntervalTuple",
    "parse_counter_line",
    "StallEvent",
    "STALL_EVENTS",
    "EVENT_KEYS",
    "CATEGORY_EVENTS",
    "REPORT_COLUMNS",
    "TOTAL_EVENT",
    "TRIGGER_EVENT",
]
