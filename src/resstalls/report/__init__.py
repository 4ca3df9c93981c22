"""
Report rendering for aggregated stall records.
"""

from .renderer import ReportRenderer

__all__ = [
    "ReportRenderer",
]
