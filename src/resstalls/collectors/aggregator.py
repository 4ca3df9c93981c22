"""
Reassembles per-interval counter tuples from a stream of `perf stat` lines.

perf reports each interval as a burst of one line per event, in the order
the events were requested. The aggregator stores each event's value as its
line arrives and, when the line for TRIGGER_EVENT (the last requested event)
is seen, derives an AggregatedRecord for the interval.

Completion is detected from the trigger line alone. Two consequences are
kept on purpose:

- if the trigger line for an interval is lost, no record is produced for
  that interval;
- if a trigger line arrives without a full burst before it, the record
  mixes fresh values with the previous interval's values (events never seen
  at all read as 0).

Both cases are counted in ``stats`` and logged at DEBUG level.
"""

import logging
import re
from collections import deque
from typing import Deque, Dict, Iterable, Iterator, Optional, Set, Tuple, Union

from ..models.results import AggregatedRecord, AggregatorStats, CounterReading
from ..validation import UnsupportedEventError
from .events import EVENT_KEYS, EVENTS_BY_KEY, TRIGGER_EVENT

logger = logging.getLogger(__name__)

NOT_SUPPORTED_MARKER = "<not supported>"

# "     1.000123456          3,000,000      r02a2   (50.01%)"
# The timestamp column is absent when perf runs without -I.
_COUNTER_LINE_RE = re.compile(
    r"^\s*(?:(?P<timestamp>\d+\.\d+)\s+)?(?P<value>\d[\d,]*)\s+(?P<event>\S+)"
)
_NOT_SUPPORTED_RE = re.compile(re.escape(NOT_SUPPORTED_MARKER) + r"\s+(?P<event>\S+)")


def parse_counter_line(line: str) -> Optional[CounterReading]:
    """
    Parses one line of `perf stat` interval output.

    Args:
        line: A raw output line.

    Returns:
        The event and its value (thousands separators removed), or None if
        the line does not carry a counter value.

    Raises:
        UnsupportedEventError: If perf reports the event as unsupported.
    """
    if NOT_SUPPORTED_MARKER in line:
        match = _NOT_SUPPORTED_RE.search(line)
        raise UnsupportedEventError(match.group("event") if match else None, line)

    match = _COUNTER_LINE_RE.match(line)
    if not match:
        return None
    return CounterReading(
        event=match.group("event"),
        value=int(match.group("value").replace(",", "")),
    )


class IntervalTuple:
    """
    The latest value of every stall event for the interval being assembled.

    Values are overwritten in place and never cleared; an event that has not
    reported yet reads as 0. ``seen`` tracks which events have reported since
    the last completed interval.
    """

    def __init__(self, keys: Tuple[str, ...] = EVENT_KEYS):
        self.keys = keys
        self.counts: Dict[str, int] = {key: 0 for key in keys}
        self.seen: Set[str] = set()

    def observe(self, key: str, value: int) -> None:
        self.counts[key] = value
        self.seen.add(key)

    def has_seen(self, key: str) -> bool:
        return key in self.seen

    def is_complete(self) -> bool:
        return len(self.seen) == len(self.keys)

    def missing(self) -> Tuple[str, ...]:
        return tuple(key for key in self.keys if key not in self.seen)

    def start_next_interval(self) -> None:
        self.seen.clear()

    def to_record(self) -> AggregatedRecord:
        fields = {EVENTS_BY_KEY[key].field: value for key, value in self.counts.items()}
        return AggregatedRecord.from_counts(**fields)


class IntervalAggregator:
    """
    Turns engine output lines into AggregatedRecords and diagnostic lines.

    Lines reporting an unsupported event are passed through unchanged;
    lines that are not counter readings for one of the stall events are
    ignored.
    """

    def __init__(self, trigger_event: str = TRIGGER_EVENT, recent_lines: int = 10):
        if trigger_event not in EVENT_KEYS:
            raise ValueError(f"trigger event {trigger_event!r} is not a stall event")
        self.trigger_event = trigger_event
        self.interval = IntervalTuple()
        self.stats = AggregatorStats()
        # Unrecognized lines, kept for error reports when perf fails.
        self.recent_ignored: Deque[str] = deque(maxlen=recent_lines)
        self._warned_unsupported: Set[Optional[str]] = set()

    def feed(self, line: str) -> Optional[Union[AggregatedRecord, str]]:
        """
        Processes a single line.

        Returns:
            An AggregatedRecord when the line completes an interval, the line
            itself when it is a diagnostic to pass through, otherwise None.
        """
        self.stats.lines_read += 1
        try:
            reading = parse_counter_line(line)
        except UnsupportedEventError as e:
            self.stats.diagnostics += 1
            if e.event_key not in self._warned_unsupported:
                self._warned_unsupported.add(e.event_key)
                logger.warning(str(e))
            return line

        if reading is None or reading.event not in EVENTS_BY_KEY:
            self.stats.ignored_lines += 1
            if line.strip():
                self.recent_ignored.append(line)
                logger.debug(f"Ignoring perf line: '{line}'")
            return None

        return self._observe(reading)

    def _observe(self, reading: CounterReading) -> Optional[AggregatedRecord]:
        self.stats.readings += 1
        interval = self.interval

        if interval.has_seen(reading.event):
            # A new burst started before the previous one was completed.
            self.stats.dropped_intervals += 1
            logger.debug(
                f"Interval dropped: '{reading.event}' repeated before '{self.trigger_event}' "
                f"was seen"
            )
            interval.start_next_interval()

        interval.observe(reading.event, reading.value)

        if reading.event != self.trigger_event:
            return None

        if not interval.is_complete():
            self.stats.stale_records += 1
            logger.debug(
                f"Interval completed without fresh values for: {', '.join(interval.missing())}"
            )
        record = interval.to_record()
        interval.start_next_interval()
        self.stats.records_emitted += 1
        return record

    def process(self, lines: Iterable[str]) -> Iterator[Union[AggregatedRecord, str]]:
        """
        Generator over a line stream, yielding records and diagnostic lines
        in input order.
        """
        for line in lines:
            item = self.feed(line)
            if item is not None:
                yield item
