"""
Tests for the StallMonitor pipeline using an in-memory collector.
"""

import io
from typing import Iterator, List, Optional

import pytest

from resstalls.cli.orchestrator import StallMonitor
from resstalls.collectors.base import AbstractCounterCollector
from resstalls.collectors.perf_stat import PerfStatCollector
from resstalls.models.config import MonitorConfig
from resstalls.system.scope import resolve_scope
from resstalls.validation import CollectorError

HEADER = "   TOTAL     LOAD     PIPE    STORE  REORDER     FPCW    MXCSR    OTHER      SUM"


class ListCollector(AbstractCounterCollector):
    """Collector replaying a fixed list of lines."""

    def __init__(self, scope, lines: List[str], returncode: int = 0, fail_start: bool = False):
        super().__init__(scope, events=())
        self.lines = lines
        self.final_returncode = returncode
        self.fail_start = fail_start
        self.started = False
        self.stopped = False
        self._returncode: Optional[int] = None

    def start(self) -> None:
        if self.fail_start:
            raise CollectorError("no perf")
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def read_lines(self) -> Iterator[str]:
        yield from self.lines
        self._returncode = self.final_returncode

    @property
    def returncode(self) -> Optional[int]:
        return self._returncode


@pytest.fixture
def scope():
    return resolve_scope(interval_seconds=1, duration_seconds=10)


@pytest.mark.unit
class TestStallMonitor:
    """Test cases for StallMonitor."""

    def test_default_collector_is_perf(self, scope):
        config = MonitorConfig(perf_executable="/opt/perf", stop_timeout=2.0)

        monitor = StallMonitor(scope, config, stream=io.StringIO())

        assert isinstance(monitor.collector, PerfStatCollector)
        assert monitor.collector.perf_executable == "/opt/perf"
        assert monitor.collector.stop_timeout == 2.0

    def test_report_output(self, scope, perf_output):
        lines = (
            ["#           time             counts unit events"]
            + perf_output.burst(1.0, perf_output.example_counts)
            + perf_output.burst(2.0, perf_output.example_counts)
        )
        stream = io.StringIO()
        collector = ListCollector(scope, lines)
        monitor = StallMonitor(scope, MonitorConfig(), stream=stream, collector=collector)

        status = monitor.run()

        assert status == 0
        assert collector.started and collector.stopped
        row = "     3.0      0.5      0.4      0.3      0.2      0.1      0.1      0.5      2.0"
        assert stream.getvalue().splitlines() == [
            "All values x 1,000,000",
            HEADER,
            row,
            row,
        ]

    def test_diagnostics_are_inlined(self, scope, perf_output):
        unsupported = "     1.000123456    <not supported>      r40a2"
        lines = [unsupported] + perf_output.burst(1.0, perf_output.example_counts)
        stream = io.StringIO()
        monitor = StallMonitor(
            scope, MonitorConfig(), stream=stream, collector=ListCollector(scope, lines)
        )

        monitor.run()

        assert stream.getvalue().splitlines()[2] == unsupported
        assert len(stream.getvalue().splitlines()) == 4

    def test_header_interval_from_config(self, scope, perf_output):
        lines = []
        for i in range(5):
            lines += perf_output.burst(float(i + 1), perf_output.example_counts)
        stream = io.StringIO()
        monitor = StallMonitor(
            scope,
            MonitorConfig(header_interval=2),
            stream=stream,
            collector=ListCollector(scope, lines),
        )

        monitor.run()

        output = stream.getvalue().splitlines()
        assert output.count(HEADER) == 3
        assert [i for i, line in enumerate(output) if line == HEADER] == [1, 4, 7]

    def test_engine_failure_status_is_returned(self, scope, caplog):
        collector = ListCollector(scope, ["event syntax error: 'resource_stalls.any'"], returncode=129)
        monitor = StallMonitor(scope, MonitorConfig(), stream=io.StringIO(), collector=collector)

        assert monitor.run() == 129
        assert "event syntax error" in caplog.text

    def test_shutdown_request_returns_zero(self, scope, perf_output):
        class InterruptingCollector(ListCollector):
            def read_lines(self):
                yield self.lines[0]
                monitor.request_shutdown()
                self._returncode = -15

        collector = InterruptingCollector(scope, perf_output.burst(1.0, perf_output.example_counts))
        monitor = StallMonitor(scope, MonitorConfig(), stream=io.StringIO(), collector=collector)

        assert monitor.run() == 0
        assert monitor.shutdown_requested
        assert collector.stopped

    def test_start_failure_propagates(self, scope):
        collector = ListCollector(scope, [], fail_start=True)
        monitor = StallMonitor(scope, MonitorConfig(), stream=io.StringIO(), collector=collector)

        with pytest.raises(CollectorError):
            monitor.run()
