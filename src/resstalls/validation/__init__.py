"""
Validation and error handling for the resstalls package.

This module provides input validation and the exception taxonomy used
across the application, with consistent error reporting.
"""

from .exceptions import (
    AmbiguousScopeError,
    CollectorError,
    ErrorSeverity,
    TargetNotFoundError,
    UnsupportedEventError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_subprocess_error,
)

from .validators import (
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
    validate_simple_command,
)

__all__ = [
    # Exceptions
    "AmbiguousScopeError",
    "CollectorError",
    "ErrorSeverity",
    "TargetNotFoundError",
    "UnsupportedEventError",
    "ValidationError",
    # Handlers
    "handle_cli_error",
    "handle_config_error",
    "handle_error",
    "handle_subprocess_error",
    # Validators
    "validate_enum_choice",
    "validate_positive_float",
    "validate_positive_integer",
    "validate_simple_command",
]
