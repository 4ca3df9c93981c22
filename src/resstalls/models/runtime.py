"""
Runtime data models.

This module contains the structures describing what a single monitoring run
measures: the resolved scope handed to the sampling engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ScopeKind(Enum):
    """What the sampling engine is pointed at."""
    SYSTEM = "system"
    CPU = "cpu"
    PID = "pid"
    COMMAND = "command"


@dataclass(frozen=True)
class MonitorScope:
    """
    A fully resolved measurement scope.

    ``target_args`` are appended verbatim to the engine command line, after
    the event and interval options.
    """

    kind: ScopeKind
    target_args: List[str] = field(default_factory=list)
    interval_seconds: float = 1.0
    duration_seconds: Optional[float] = None
    # The selected CPU id, process id or command, None for system-wide.
    target: Optional[str] = None

    @property
    def interval_ms(self) -> int:
        """Sampling interval in milliseconds, as the engine expects it."""
        return int(round(self.interval_seconds * 1000))

    def describe(self) -> str:
        if self.kind is ScopeKind.SYSTEM:
            return "all CPUs"
        if self.kind is ScopeKind.CPU:
            return f"CPU {self.target}"
        if self.kind is ScopeKind.PID:
            return f"PID {self.target}"
        return f"command: {self.target}"
