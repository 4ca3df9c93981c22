"""
Checks for external commands the monitor depends on.
"""

import logging
import shutil

logger = logging.getLogger(__name__)


def check_perf_installed(perf_executable: str = "perf") -> bool:
    """Check if the perf binary is available on the system.

    Args:
        perf_executable: Command name or path of the perf binary.

    Returns:
        True if perf is found (on PATH, or at the given path), False otherwise.

    Note:
        perf is usually shipped in the linux-tools (Debian/Ubuntu) or perf
        (Fedora/RHEL) package.
    """
    found = shutil.which(perf_executable)
    if found:
        logger.debug(f"Using perf at {found}")
    return found is not None
