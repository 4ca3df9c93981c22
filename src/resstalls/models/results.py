"""
Result data models produced by the aggregation pipeline.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CounterReading:
    """One event value parsed from a single engine output line."""

    event: str
    value: int


@dataclass(frozen=True)
class AggregatedRecord:
    """
    Stall counts for one completed sampling interval.

    ``sum`` is the sum of the seven sub-category counters. It never includes
    ``total``, which the CPU measures independently and may disagree with
    the categories.
    """

    total: int
    load: int
    pipe: int
    store: int
    reorder: int
    fpcw: int
    mxcsr: int
    other: int
    sum: int

    @classmethod
    def from_counts(cls, total: int, load: int, pipe: int, store: int,
                    reorder: int, fpcw: int, mxcsr: int, other: int) -> "AggregatedRecord":
        """Build a record, deriving ``sum`` from the category counts."""
        return cls(
            total=total,
            load=load,
            pipe=pipe,
            store=store,
            reorder=reorder,
            fpcw=fpcw,
            mxcsr=mxcsr,
            other=other,
            sum=load + pipe + store + reorder + fpcw + mxcsr + other,
        )

    def values(self) -> tuple:
        """All nine report values in column order."""
        return (
            self.total,
            self.load,
            self.pipe,
            self.store,
            self.reorder,
            self.fpcw,
            self.mxcsr,
            self.other,
            self.sum,
        )


@dataclass
class AggregatorStats:
    """Counters describing what the aggregator has seen so far."""

    lines_read: int = 0
    readings: int = 0
    records_emitted: int = 0
    diagnostics: int = 0
    ignored_lines: int = 0
    # Bursts that restarted before their trigger line arrived.
    dropped_intervals: int = 0
    # Records emitted while some events had not been refreshed.
    stale_records: int = 0
