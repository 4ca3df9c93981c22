"""
Resolution of the measurement scope.

Turns the user's selection (at most one of a CPU id, a process id or a
command line) plus interval and duration into the target arguments for
`perf stat`:

- nothing selected: all CPUs for ``duration`` seconds
- CPU id: that CPU for ``duration`` seconds
- process id: that process for ``duration`` seconds
- command: the lifetime of the command

For the first three, an idle ``sleep`` process is run as the perf workload
so that its lifetime bounds the measurement.
"""

import logging
from typing import List, Optional

import psutil

from ..config.validators import MAX_INTERVAL_SECONDS, MIN_INTERVAL_SECONDS
from ..models.config import UNBOUNDED_DURATION_SECONDS
from ..models.runtime import MonitorScope, ScopeKind
from ..validation import (
    AmbiguousScopeError,
    TargetNotFoundError,
    validate_positive_float,
    validate_positive_integer,
    validate_simple_command,
)

logger = logging.getLogger(__name__)

IDLE_COMMAND = "sleep"


def _format_seconds(seconds: float) -> str:
    # sleep(1) accepts fractional seconds; print whole numbers without ".0"
    return f"{seconds:g}" if seconds != int(seconds) else str(int(seconds))


def _idle_workload(duration_seconds: float) -> List[str]:
    return [IDLE_COMMAND, _format_seconds(duration_seconds)]


def process_exists(pid: int) -> bool:
    """Whether a process with this id currently exists."""
    return psutil.pid_exists(pid)


def resolve_scope(
    cpu: Optional[int] = None,
    pid: Optional[int] = None,
    command: Optional[str] = None,
    interval_seconds: float = 1.0,
    duration_seconds: Optional[float] = None,
) -> MonitorScope:
    """
    Resolve a scope selection into a MonitorScope.

    Args:
        cpu: CPU id to measure.
        pid: Process id to measure.
        command: Shell command whose execution is measured.
        interval_seconds: Sampling interval.
        duration_seconds: How long to measure; None means unbounded. Ignored
            for command scopes.

    Returns:
        The resolved scope.

    Raises:
        AmbiguousScopeError: If more than one of cpu, pid, command is given.
        TargetNotFoundError: If ``pid`` does not name a running process.
        ValidationError: If a value is out of range.
    """
    selected = [
        name
        for name, value in (("-C cpu", cpu), ("-p pid", pid), ("-c command", command))
        if value is not None
    ]
    if len(selected) > 1:
        raise AmbiguousScopeError(selected)

    interval_seconds = validate_positive_float(
        interval_seconds,
        min_value=MIN_INTERVAL_SECONDS,
        max_value=MAX_INTERVAL_SECONDS,
        field_name="interval",
    )
    if duration_seconds is None:
        duration_seconds = UNBOUNDED_DURATION_SECONDS
    duration_seconds = validate_positive_float(
        duration_seconds,
        min_value=MIN_INTERVAL_SECONDS,
        max_value=UNBOUNDED_DURATION_SECONDS,
        field_name="duration",
    )

    if cpu is not None:
        cpu = validate_positive_integer(cpu, min_value=0, field_name="cpu")
        scope = MonitorScope(
            kind=ScopeKind.CPU,
            target_args=["-C", str(cpu)] + _idle_workload(duration_seconds),
            interval_seconds=interval_seconds,
            duration_seconds=duration_seconds,
            target=str(cpu),
        )
    elif pid is not None:
        pid = validate_positive_integer(pid, min_value=1, field_name="pid")
        if not process_exists(pid):
            raise TargetNotFoundError(pid)
        scope = MonitorScope(
            kind=ScopeKind.PID,
            target_args=["-p", str(pid)] + _idle_workload(duration_seconds),
            interval_seconds=interval_seconds,
            duration_seconds=duration_seconds,
            target=str(pid),
        )
    elif command is not None:
        command = validate_simple_command(command, field_name="command")
        scope = MonitorScope(
            kind=ScopeKind.COMMAND,
            target_args=["sh", "-c", command],
            interval_seconds=interval_seconds,
            duration_seconds=None,
            target=command,
        )
    else:
        scope = MonitorScope(
            kind=ScopeKind.SYSTEM,
            target_args=["-a"] + _idle_workload(duration_seconds),
            interval_seconds=interval_seconds,
            duration_seconds=duration_seconds,
        )

    logger.info(f"Resolved measurement scope: {scope.describe()}")
    return scope
