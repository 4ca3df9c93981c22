"""
Fixed-width text rendering of aggregated stall records.

Each record becomes one row of nine right-aligned columns, every value
divided by ``value_divisor`` and shown with one decimal place. The column
header is printed before the first row and again after every
``header_interval`` rows so long runs stay readable.
"""

import logging
import sys
from typing import Optional, TextIO

from ..collectors.events import REPORT_COLUMNS
from ..models.results import AggregatedRecord

logger = logging.getLogger(__name__)

DEFAULT_HEADER_INTERVAL = 25
DEFAULT_VALUE_DIVISOR = 1000000
DEFAULT_COLUMN_WIDTH = 8


class ReportRenderer:
    """
    Writes the report to a text stream.

    Attributes:
        rows_left: Rows that may still be printed before the header is
            repeated. Starts at ``header_interval`` and stays within
            ``[0, header_interval]``.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        header_interval: int = DEFAULT_HEADER_INTERVAL,
        value_divisor: int = DEFAULT_VALUE_DIVISOR,
        column_width: int = DEFAULT_COLUMN_WIDTH,
    ):
        if header_interval < 1:
            raise ValueError("header_interval must be at least 1")
        if value_divisor < 1:
            raise ValueError("value_divisor must be at least 1")
        self.stream = stream if stream is not None else sys.stdout
        self.header_interval = header_interval
        self.value_divisor = value_divisor
        self.column_width = column_width
        self.rows_left = header_interval
        self.rows_written = 0
        self._header_written = False

    def banner(self) -> str:
        return f"All values x {self.value_divisor:,}"

    def format_header(self) -> str:
        return " ".join(f"{name:>{self.column_width}}" for name in REPORT_COLUMNS)

    def format_row(self, record: AggregatedRecord) -> str:
        return " ".join(
            f"{value / self.value_divisor:{self.column_width}.1f}" for value in record.values()
        )

    def write_banner(self) -> None:
        self._write(self.banner())

    def write_header(self) -> None:
        self._write(self.format_header())
        self.rows_left = self.header_interval
        self._header_written = True

    def write_record(self, record: AggregatedRecord) -> None:
        """Writes one row, preceded by the header when one is due."""
        if not self._header_written or self.rows_left == 0:
            self.write_header()
        self._write(self.format_row(record))
        self.rows_left -= 1
        self.rows_written += 1

    def write_diagnostic(self, line: str) -> None:
        self._write(line)

    def _write(self, text: str) -> None:
        self.stream.write(text + "\n")
        self.stream.flush()
