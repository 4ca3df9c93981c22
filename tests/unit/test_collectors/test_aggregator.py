"""
Unit tests for perf line parsing and interval aggregation.
"""

import logging

import pytest

from resstalls.collectors.aggregator import (
    IntervalAggregator,
    IntervalTuple,
    parse_counter_line,
)
from resstalls.collectors.events import EVENT_KEYS, TRIGGER_EVENT
from resstalls.models.results import AggregatedRecord, CounterReading
from resstalls.validation import UnsupportedEventError


@pytest.mark.unit
class TestParseCounterLine:
    """Test cases for parse_counter_line."""

    def test_interval_line_with_thousands_separators(self):
        reading = parse_counter_line("     1.000123456          3,000,000      resource_stalls.any")
        assert reading == CounterReading(event="resource_stalls.any", value=3000000)

    def test_line_without_separators(self):
        reading = parse_counter_line("     2.000231111             500000      r02a2")
        assert reading == CounterReading(event="r02a2", value=500000)

    def test_line_without_timestamp(self):
        reading = parse_counter_line("          123,456      r10a2")
        assert reading == CounterReading(event="r10a2", value=123456)

    def test_multiplexing_suffix_is_ignored(self):
        reading = parse_counter_line("     1.000123456            42,000      r04a2    (49.98%)")
        assert reading == CounterReading(event="r04a2", value=42000)

    @pytest.mark.parametrize(
        "line",
        [
            "",
            "#           time             counts unit events",
            " Performance counter stats for 'sleep 1':",
            "     1.000123456      <not counted>      r20a2",
            "some output of the measured command",
        ],
    )
    def test_non_counter_lines_return_none(self, line):
        assert parse_counter_line(line) is None

    def test_unsupported_event_raises(self):
        line = "     1.000123456    <not supported>      r40a2"
        with pytest.raises(UnsupportedEventError) as exc_info:
            parse_counter_line(line)

        assert exc_info.value.event_key == "r40a2"
        assert exc_info.value.line == line


@pytest.mark.unit
class TestIntervalTuple:
    """Test cases for IntervalTuple."""

    def test_unseen_events_read_as_zero(self):
        interval = IntervalTuple()
        interval.observe("r02a2", 7)

        record = interval.to_record()

        assert record.load == 7
        assert record.total == 0
        assert record.sum == 7

    def test_completion_requires_every_event(self):
        interval = IntervalTuple()
        for key in EVENT_KEYS[:-1]:
            interval.observe(key, 1)
        assert not interval.is_complete()
        assert interval.missing() == (TRIGGER_EVENT,)

        interval.observe(TRIGGER_EVENT, 1)
        assert interval.is_complete()

    def test_values_persist_across_intervals(self):
        interval = IntervalTuple()
        interval.observe("r08a2", 99)
        interval.start_next_interval()

        assert not interval.has_seen("r08a2")
        assert interval.to_record().store == 99


@pytest.mark.unit
class TestIntervalAggregator:
    """Test cases for IntervalAggregator."""

    def test_example_interval(self, perf_output):
        aggregator = IntervalAggregator()
        lines = perf_output.burst(1.0, perf_output.example_counts)

        items = list(aggregator.process(lines))

        assert items == [
            AggregatedRecord(
                total=3_000_000,
                load=500_000,
                pipe=400_000,
                store=300_000,
                reorder=200_000,
                fpcw=100_000,
                mxcsr=50_000,
                other=450_000,
                sum=2_000_000,
            )
        ]

    def test_sum_excludes_total(self, perf_output):
        counts = dict(perf_output.example_counts)
        counts["resource_stalls.any"] = 1
        aggregator = IntervalAggregator()

        (record,) = aggregator.process(perf_output.burst(1.0, counts))

        assert record.total == 1
        assert record.sum == 500_000 + 400_000 + 300_000 + 200_000 + 100_000 + 50_000 + 450_000

    def test_two_bursts_yield_two_records_in_order(self, perf_output):
        first = dict(perf_output.example_counts)
        second = {key: value * 2 for key, value in first.items()}
        lines = perf_output.burst(1.0, first) + perf_output.burst(2.0, second)
        assert len(lines) == 16

        records = list(IntervalAggregator().process(lines))

        assert len(records) == 2
        assert records[0].total == 3_000_000
        assert records[1].total == 6_000_000
        assert records[1].sum == 2 * records[0].sum

    def test_missing_trigger_drops_that_interval(self, perf_output):
        first = perf_output.burst(1.0, perf_output.example_counts)
        second = perf_output.burst(2.0, perf_output.example_counts)
        del first[-1]
        aggregator = IntervalAggregator()

        assert list(aggregator.process(first)) == []

        records = list(aggregator.process(second))
        assert len(records) == 1
        assert aggregator.stats.dropped_intervals == 1
        assert aggregator.stats.records_emitted == 1

    def test_duplicated_trigger_emits_stale_record(self, perf_output):
        lines = perf_output.burst(1.0, perf_output.example_counts)
        lines.append(perf_output.line(1.0, TRIGGER_EVENT, 1_000_000))
        aggregator = IntervalAggregator()

        records = list(aggregator.process(lines))

        assert len(records) == 2
        # the second record reuses the first interval's category values
        assert records[1].load == 500_000
        assert records[1].other == 1_000_000
        assert aggregator.stats.stale_records == 1

    def test_unsupported_line_passes_through_untouched(self, perf_output, caplog):
        counts = perf_output.example_counts
        unsupported = "     1.000123456    <not supported>      r40a2"
        lines = perf_output.burst(1.0, counts)
        lines.insert(3, unsupported)
        aggregator = IntervalAggregator()

        with caplog.at_level(logging.WARNING):
            items = list(aggregator.process(lines))

        assert items[0] == unsupported
        assert isinstance(items[1], AggregatedRecord)
        assert items[1].store == counts["r08a2"]
        assert items[1].mxcsr == counts["r40a2"]
        assert "r40a2" in caplog.text

    def test_unsupported_warning_logged_once_per_event(self, caplog):
        aggregator = IntervalAggregator()
        line = "     1.000123456    <not supported>      r40a2"

        with caplog.at_level(logging.WARNING):
            for _ in range(3):
                assert aggregator.feed(line) == line

        assert caplog.text.count("event r40a2 is not supported") == 1
        assert aggregator.stats.diagnostics == 3

    def test_unknown_and_malformed_lines_are_ignored(self, perf_output):
        lines = [
            "#           time             counts unit events",
            perf_output.line(1.0, "cycles", 123),
            "garbage",
            "",
        ] + perf_output.burst(1.0, perf_output.example_counts)
        aggregator = IntervalAggregator()

        records = list(aggregator.process(lines))

        assert len(records) == 1
        assert aggregator.stats.ignored_lines == 4
        assert "garbage" in aggregator.recent_ignored

    def test_event_keys_are_case_sensitive(self, perf_output):
        aggregator = IntervalAggregator()

        assert aggregator.feed(perf_output.line(1.0, TRIGGER_EVENT.upper(), 5)) is None
        assert aggregator.stats.readings == 0

    def test_trigger_must_be_a_stall_event(self):
        with pytest.raises(ValueError):
            IntervalAggregator(trigger_event="cycles")
