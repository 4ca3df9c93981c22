"""
Command-line interface for the resstalls package.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
