"""
Runs one monitoring session: engine output → aggregator → renderer.

The pipeline is single threaded. The only blocking call is the read of the
next perf line; a shutdown request terminates perf, which ends the stream.
"""

import logging
import signal
import threading
from typing import Any, Optional, TextIO

from ..collectors.aggregator import IntervalAggregator
from ..collectors.base import AbstractCounterCollector
from ..collectors.perf_stat import PerfStatCollector
from ..models.config import MonitorConfig
from ..models.results import AggregatedRecord
from ..models.runtime import MonitorScope
from ..report.renderer import ReportRenderer

logger = logging.getLogger(__name__)


class StallMonitor:
    """
    Coordinates the collector, aggregator and renderer for a single scope.
    """

    def __init__(
        self,
        scope: MonitorScope,
        config: MonitorConfig,
        stream: Optional[TextIO] = None,
        collector: Optional[AbstractCounterCollector] = None,
    ):
        """
        Args:
            scope: The resolved measurement scope.
            config: Monitor configuration.
            stream: Where the report is written (stdout by default).
            collector: Collector to read from; a PerfStatCollector for
                ``scope`` when omitted.
        """
        self.scope = scope
        self.config = config
        self.collector = collector or PerfStatCollector(
            scope,
            perf_executable=config.perf_executable,
            stop_timeout=config.stop_timeout,
        )
        self.aggregator = IntervalAggregator()
        self.renderer = ReportRenderer(
            stream,
            header_interval=config.header_interval,
            value_divisor=config.value_divisor,
            column_width=config.column_width,
        )
        self.shutdown_requested = False
        self._original_handlers: dict = {}

    def request_shutdown(self) -> None:
        """Ask the engine to stop; the pipeline drains and returns."""
        if self.shutdown_requested:
            logger.warning("Shutdown already in progress.")
            return
        self.shutdown_requested = True
        request_stop = getattr(self.collector, "request_stop", None)
        if request_stop is not None:
            request_stop()

    def _signal_handler(self, signum: int, frame: Any) -> None:
        logger.info(f"Signal {signal.strsignal(signum)} received. Stopping perf...")
        self.request_shutdown()

    def _setup_signal_handlers(self) -> None:
        # signal.signal only works from the main thread
        if threading.current_thread() is not threading.main_thread():
            return
        for signum in (signal.SIGINT, signal.SIGTERM):
            self._original_handlers[signum] = signal.signal(signum, self._signal_handler)

    def _cleanup_signal_handlers(self) -> None:
        for signum, handler in self._original_handlers.items():
            signal.signal(signum, handler)
        self._original_handlers = {}

    def run(self) -> int:
        """
        Run until the engine exits or a shutdown is requested.

        Returns:
            0 on a normal end or requested shutdown, otherwise perf's exit
            status.

        Raises:
            CollectorError: If perf cannot be started.
        """
        self.renderer.write_banner()
        self.renderer.write_header()

        self._setup_signal_handlers()
        try:
            self.collector.start()
            try:
                for item in self.aggregator.process(self.collector.read_lines()):
                    if isinstance(item, AggregatedRecord):
                        self.renderer.write_record(item)
                    else:
                        self.renderer.write_diagnostic(item)
            except KeyboardInterrupt:
                self.shutdown_requested = True
                logger.info("Interrupted, stopping perf...")
            except BrokenPipeError:
                self.shutdown_requested = True
                logger.debug("Report stream closed, stopping perf...")
            finally:
                self.collector.stop()
        finally:
            self._cleanup_signal_handlers()

        stats = self.aggregator.stats
        logger.info(
            f"Processed {stats.lines_read} lines: {stats.records_emitted} intervals reported, "
            f"{stats.dropped_intervals} dropped, {stats.diagnostics} diagnostics"
        )
        return self._exit_status()

    def _exit_status(self) -> int:
        if self.shutdown_requested:
            return 0
        returncode = self.collector.returncode
        if not returncode:
            return 0
        logger.error(f"perf exited with status {returncode}")
        for line in self.aggregator.recent_ignored:
            logger.error(f"perf: {line}")
        return returncode if returncode > 0 else 1
