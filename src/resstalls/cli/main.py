"""
Command-line interface for the resstalls resource-stall monitor.

    resstalls [-C CPU | -p PID | -c CMD] [--config PATH] [interval [duration]]

Samples the RESOURCE_STALLS counters with `perf stat` every ``interval``
seconds and prints one row per interval, in millions of cycles.
"""

import argparse
import logging
import os
import sys
import tomllib
from pathlib import Path
from typing import List, Optional

from ..config import get_config, set_config_path
from ..system.commands import check_perf_installed
from ..system.scope import resolve_scope
from ..validation import (
    CollectorError,
    TargetNotFoundError,
    ValidationError,
    handle_cli_error,
)
from .orchestrator import StallMonitor

# --- Logging Setup ---
# The report goes to stdout; diagnostics go to stderr.
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

EPILOG = """\
examples:
  resstalls              # all CPUs, 1 second intervals, until Ctrl-C
  resstalls 5 60         # all CPUs, 5 second intervals, for 60 seconds
  resstalls -C 0         # CPU 0 only
  resstalls -p 181       # PID 181 only
  resstalls -c 'gzip -9 file'  # the gzip command only

columns (millions of stall cycles):
  TOTAL    all resource-related stalls
  LOAD     load buffer full
  PIPE     reservation station full
  STORE    store buffer full
  REORDER  re-order buffer full
  FPCW     floating-point control word writes
  MXCSR    register rename / MXCSR writes
  OTHER    other resource stalls
  SUM      LOAD + PIPE + STORE + REORDER + FPCW + MXCSR + OTHER
"""


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser.

    The scope selectors are not declared mutually exclusive here; the scope
    resolver rejects combinations so the rule lives in one place.
    """
    parser = argparse.ArgumentParser(
        prog="resstalls",
        description="Summarize CPU resource stall cycles by cause, using perf.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-C", dest="cpu", type=int, metavar="CPU", help="measure this CPU only")
    parser.add_argument("-p", dest="pid", type=int, metavar="PID", help="measure this PID only")
    parser.add_argument("-c", dest="command", metavar="CMD", help="measure this command only (quote it)")
    parser.add_argument(
        "--config",
        type=Path,
        metavar="PATH",
        help="read settings from this TOML file",
    )
    parser.add_argument(
        "interval",
        nargs="?",
        help="output interval in seconds (default from config, 1)",
    )
    parser.add_argument(
        "duration",
        nargs="?",
        help="total duration in seconds (default: unbounded; ignored with -c)",
    )
    return parser


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line entry point.

    Exits with status 2 on usage errors (including more than one scope
    selector), 1 when the target process, perf or the configuration is
    unusable, and otherwise with the status returned by the monitor.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.config is not None:
        set_config_path(args.config)

    try:
        config = get_config()
    except (FileNotFoundError, ValidationError, tomllib.TOMLDecodeError) as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=1,
            logger=logger,
        )

    logging.getLogger().setLevel(config.log_level)

    interval = args.interval if args.interval is not None else config.interval_seconds
    duration = args.duration if args.duration is not None else config.duration_seconds

    try:
        scope = resolve_scope(
            cpu=args.cpu,
            pid=args.pid,
            command=args.command,
            interval_seconds=interval,
            duration_seconds=duration,
        )
    except TargetNotFoundError as e:
        handle_cli_error(error=e, context="scope resolution", exit_code=1, logger=logger)
    except ValidationError as e:
        parser.print_usage(sys.stderr)
        handle_cli_error(error=e, context="argument validation", exit_code=2, logger=logger)

    if not check_perf_installed(config.perf_executable):
        logger.error(
            f"perf executable '{config.perf_executable}' not found. Please install it "
            "(e.g., 'sudo apt-get install linux-tools-generic') or set "
            "monitor.collection.perf_executable in the configuration."
        )
        sys.exit(1)

    monitor = StallMonitor(scope, config)
    try:
        status = monitor.run()
    except CollectorError as e:
        handle_cli_error(error=e, context="starting perf", exit_code=1, logger=logger)

    try:
        sys.stdout.flush()
    except BrokenPipeError:
        # Keep the interpreter from complaining again at exit.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())

    sys.exit(status)


if __name__ == "__main__":
    main_cli()
