"""
Counter collector implementation using `perf stat` in interval mode.

This module provides the PerfStatCollector class, which launches
`perf stat -I <ms>` with the stall events against a resolved scope and
streams its combined stdout/stderr line by line.
"""

import logging
import os
import subprocess
from typing import Iterator, List, Optional, Sequence

from ..models.runtime import MonitorScope, ScopeKind
from ..validation import CollectorError, handle_subprocess_error, ErrorSeverity
from .base import AbstractCounterCollector
from .events import EVENT_KEYS

logger = logging.getLogger(__name__)


class PerfStatCollector(AbstractCounterCollector):
    """
    Collects interval counter output from `perf stat`.

    perf writes its interval reports to stderr; stderr is merged into stdout
    so the report lines and any diagnostics arrive in a single ordered stream.

    Attributes:
        perf_executable: The perf binary to run.
        stop_timeout: Seconds to wait after SIGTERM before sending SIGKILL.
        perf_proc: The running perf subprocess, or None.
    """

    def __init__(
        self,
        scope: MonitorScope,
        events: Sequence[str] = EVENT_KEYS,
        perf_executable: str = "perf",
        stop_timeout: float = 5.0,
    ):
        super().__init__(scope, events)
        self.perf_executable = perf_executable
        self.stop_timeout = stop_timeout
        self.perf_proc: Optional[subprocess.Popen] = None
        self._returncode: Optional[int] = None

    def build_command(self) -> List[str]:
        """
        Builds the perf command line.

        Returns:
            ``[perf, "stat", "-e", <event>, ..., "-I", <ms>, <scope target args>]``
        """
        cmd: List[str] = [self.perf_executable, "stat"]
        for event in self.events:
            cmd.extend(["-e", event])
        cmd.extend(["-I", str(self.scope.interval_ms)])
        cmd.extend(self.scope.target_args)
        return cmd

    def start(self) -> None:
        """
        Starts the perf subprocess.

        ``LC_ALL=C`` keeps perf from grouping counts with locale separators.
        A measured command inherits stdin; other scopes get /dev/null.

        Raises:
            CollectorError: If perf fails to start.
        """
        if self.perf_proc is not None:
            logger.warning("perf is already running; ignoring start request.")
            return

        perf_cmd = self.build_command()
        perf_env = os.environ.copy()
        perf_env["LC_ALL"] = "C"
        perf_stdin = None if self.scope.kind is ScopeKind.COMMAND else subprocess.DEVNULL

        logger.info(f"Starting perf collector with command: {' '.join(perf_cmd)}")
        try:
            self.perf_proc = subprocess.Popen(
                perf_cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=perf_stdin,
                text=True,
                errors="replace",
                bufsize=1,
                env=perf_env,
            )
        except OSError as e:
            handle_subprocess_error(
                e,
                " ".join(perf_cmd),
                severity=ErrorSeverity.ERROR,
                reraise=False,
                logger=logger,
            )
            raise CollectorError(f"Failed to start perf: {e}") from e

        logger.info(f"perf process started (PID: {self.perf_proc.pid}).")

    def read_lines(self) -> Iterator[str]:
        """
        Yields perf output lines until perf exits or its stdout closes.
        """
        if not self.perf_proc or not self.perf_proc.stdout:
            logger.warning("perf process not running or stdout not available for reading.")
            return

        for line in iter(self.perf_proc.stdout.readline, ""):
            yield line.rstrip("\n")

        self._returncode = self.perf_proc.wait()
        logger.info(f"perf exited with status {self._returncode}.")

    def request_stop(self) -> None:
        """
        Sends SIGTERM to perf without waiting.

        Safe to call from a signal handler; the reader sees EOF once perf exits.
        """
        if self.perf_proc and self.perf_proc.poll() is None:
            logger.info(f"Requesting perf (PID: {self.perf_proc.pid}) to stop.")
            try:
                self.perf_proc.terminate()
            except ProcessLookupError:
                pass

    def stop(self) -> None:
        """
        Stops perf and closes its output pipe.

        Terminates perf gracefully (SIGTERM), falling back to SIGKILL if it
        does not exit within ``stop_timeout``. Safe to call repeatedly.
        """
        if self.perf_proc is None:
            return

        if self.perf_proc.poll() is None:
            logger.info(f"Stopping perf process (PID: {self.perf_proc.pid})...")
            self.perf_proc.terminate()
            try:
                self.perf_proc.wait(timeout=self.stop_timeout)
            except subprocess.TimeoutExpired:
                logger.warning(
                    f"perf process (PID: {self.perf_proc.pid}) did not terminate gracefully, killing..."
                )
                self.perf_proc.kill()
                self.perf_proc.wait()

        self._returncode = self.perf_proc.returncode
        if self.perf_proc.stdout:
            self.perf_proc.stdout.close()
        self.perf_proc = None
        logger.info("PerfStatCollector stopped.")

    @property
    def returncode(self) -> Optional[int]:
        if self.perf_proc is not None and self._returncode is None:
            return self.perf_proc.poll()
        return self._returncode
