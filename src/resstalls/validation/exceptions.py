"""
Exception types and error handling helpers.

This module defines the exceptions raised while resolving a measurement scope
and reading engine output, together with small helpers that log errors
consistently before (optionally) re-raising or exiting.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ValidationError(Exception):
    """
    Exception raised when validation fails.

    This is the base type for every input problem detected before sampling
    starts (bad arguments, bad configuration values, bad scope selection).
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class AmbiguousScopeError(ValidationError):
    """More than one of CPU, process id and command was selected."""

    def __init__(self, selectors: list):
        super().__init__(
            f"only one of {', '.join(selectors)} may be given",
            field_name="scope",
            value=selectors,
        )
        self.selectors = selectors


class TargetNotFoundError(ValidationError):
    """The process selected with a process-id scope does not exist."""

    def __init__(self, pid: int):
        super().__init__(f"PID {pid} not found", field_name="pid", value=pid)
        self.pid = pid


class UnsupportedEventError(Exception):
    """
    The sampling engine reported an event as unsupported by the host CPU.

    Raised by the line parser and handled by the aggregator, which passes the
    original line through to the report. Never fatal.
    """

    def __init__(self, event_key: Optional[str], line: str):
        super().__init__(f"event {event_key or '<unknown>'} is not supported: {line.strip()}")
        self.event_key = event_key
        self.line = line


class CollectorError(RuntimeError):
    """The sampling engine could not be started."""


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg, exc_info=True)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_subprocess_error(error: Exception, command: str, **kwargs) -> None:
    """Handle subprocess-related errors."""
    handle_error(error, f"subprocess command '{command}'", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Handle CLI-related errors by logging them and exiting."""
    exit_code = kwargs.pop('exit_code', 1)
    include_traceback = kwargs.pop('include_traceback', False)

    severity = kwargs.pop('severity', ErrorSeverity.CRITICAL if include_traceback else ErrorSeverity.ERROR)
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)

    sys.exit(exit_code)
