"""
Pytest configuration and shared fixtures for the resstalls test suite.
"""

import stat
import sys
from pathlib import Path
from typing import Dict, List

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


# ============================================================================
# perf output helpers
# ============================================================================

EXAMPLE_COUNTS: Dict[str, int] = {
    "resource_stalls.any": 3_000_000,
    "r02a2": 500_000,
    "r04a2": 400_000,
    "r08a2": 300_000,
    "r10a2": 200_000,
    "r20a2": 100_000,
    "r40a2": 50_000,
    "r80a2": 450_000,
}


def perf_line(timestamp: float, event: str, value: int) -> str:
    """Format a counter line the way `perf stat -I` prints it."""
    return f"{timestamp:16.9f} {value:>18,}      {event}"


def perf_burst(timestamp: float, counts: Dict[str, int]) -> List[str]:
    """One interval's burst of lines, in the order of ``counts``."""
    return [perf_line(timestamp, event, value) for event, value in counts.items()]


class PerfOutput:
    """Helpers for building perf output in tests."""

    line = staticmethod(perf_line)
    burst = staticmethod(perf_burst)
    example_counts = EXAMPLE_COUNTS


@pytest.fixture
def perf_output():
    """Provide perf output builders."""
    return PerfOutput


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def sample_config_data():
    """Sample [monitor] configuration data for testing."""
    return {
        "general": {
            "log_level": "INFO",
        },
        "collection": {
            "perf_executable": "perf",
            "interval_seconds": 2.0,
            "duration_seconds": 30,
            "stop_timeout": 1.0,
        },
        "report": {
            "header_interval": 10,
            "value_divisor": 1000,
            "column_width": 10,
        },
    }


@pytest.fixture
def config_file(tmp_path, sample_config_data):
    """Write the sample configuration to a temporary config.toml."""
    import toml

    path = tmp_path / "config.toml"
    with open(path, "w") as f:
        toml.dump({"monitor": sample_config_data}, f)
    return path


@pytest.fixture
def fake_perf(tmp_path):
    """
    Create an executable stand-in for perf.

    Returns a function taking the output lines; the script writes them to
    stderr (as perf does) and records its arguments in ``args.txt``.
    """

    def _make(lines: List[str], exit_code: int = 0) -> Path:
        script = tmp_path / "perf"
        output = tmp_path / "perf_output.txt"
        output.write_text("".join(line + "\n" for line in lines))
        script.write_text(
            "#!/bin/sh\n"
            f'printf "%s\\n" "$@" > "{tmp_path}/args.txt"\n'
            f'cat "{output}" >&2\n'
            f"exit {exit_code}\n"
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically reset the configuration singleton after each test."""
    yield

    from resstalls.config import reset_config_path

    reset_config_path()
