"""
Defines the abstract interface for counter collectors.

A collector wraps an external sampling engine: it starts the engine against
a resolved scope, exposes the engine's output as a stream of text lines and
stops it again.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterator, Optional, Sequence

from ..models.runtime import MonitorScope

logger = logging.getLogger(__name__)


class AbstractCounterCollector(ABC):
    """
    Abstract base class for counter collectors.

    Subclasses launch a concrete engine (e.g. `perf stat`) and yield its raw
    output lines; parsing is left to the aggregator.
    """

    def __init__(self, scope: MonitorScope, events: Sequence[str]):
        """
        Initializes the AbstractCounterCollector.

        Args:
            scope: The resolved measurement scope.
            events: Event keys to request, in order.
        """
        self.scope = scope
        self.events = tuple(events)
        logger.info(
            f"Initializing {self.__class__.__name__} for {scope.describe()}, "
            f"interval: {scope.interval_ms}ms, events: {', '.join(self.events)}"
        )

    @abstractmethod
    def start(self) -> None:
        """Starts the sampling engine."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stops the sampling engine and releases its resources."""
        pass

    @abstractmethod
    def read_lines(self) -> Iterator[str]:
        """
        Yields engine output lines, without trailing newlines, until the
        engine exits.
        """
        pass

    @property
    def returncode(self) -> Optional[int]:
        """The engine's exit status, or None while running / not started."""
        return None

    def __enter__(self) -> "AbstractCounterCollector":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
