"""
System interaction utilities: scope resolution against running processes
and checks for the external sampling engine.
"""

from .commands import check_perf_installed
from .scope import process_exists, resolve_scope

__all__ = [
    "check_perf_installed",
    "process_exists",
    "resolve_scope",
]
