"""
The fixed set of RESOURCE_STALLS hardware events sampled by the monitor.

The order of STALL_EVENTS is significant twice over: it is the order the
events are requested from perf, and perf reports an interval's counters in
the order they were requested. The last event therefore always closes an
interval's burst of lines and serves as TRIGGER_EVENT.
"""

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class StallEvent:
    """A hardware event: perf event key, report column, record field."""

    key: str
    column: str
    field: str
    description: str


STALL_EVENTS: Tuple[StallEvent, ...] = (
    StallEvent("resource_stalls.any", "TOTAL", "total", "Resource-related stall cycles"),
    StallEvent("r02a2", "LOAD", "load", "Load buffer full"),
    StallEvent("r04a2", "PIPE", "pipe", "Reservation station full"),
    StallEvent("r08a2", "STORE", "store", "Store buffer full"),
    StallEvent("r10a2", "REORDER", "reorder", "Re-order buffer full"),
    StallEvent("r20a2", "FPCW", "fpcw", "Floating-point control word writes"),
    StallEvent("r40a2", "MXCSR", "mxcsr", "Register rename / MXCSR writes"),
    StallEvent("r80a2", "OTHER", "other", "Other resource stalls"),
)

EVENT_KEYS: Tuple[str, ...] = tuple(event.key for event in STALL_EVENTS)

# Independently measured total; excluded from the category sum.
TOTAL_EVENT = STALL_EVENTS[0].key

# Last requested event; its line completes an interval.
TRIGGER_EVENT = STALL_EVENTS[-1].key

CATEGORY_EVENTS: Tuple[str, ...] = EVENT_KEYS[1:]

EVENTS_BY_KEY: Dict[str, StallEvent] = {event.key: event for event in STALL_EVENTS}

REPORT_COLUMNS: Tuple[str, ...] = tuple(event.column for event in STALL_EVENTS) + ("SUM",)
