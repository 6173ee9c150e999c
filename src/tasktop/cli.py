"""Command-line entry point for tasktop."""

import argparse
import logging
import sys
import time

from tasktop import query
from tasktop.app import run_app
from tasktop.config import MonitorConfig
from tasktop.control import DEFAULT_SIGNAL, ProcessControl
from tasktop.errors import InvalidSortField, KillError, SnapshotError
from tasktop.formatting import TABLE_HEADER, format_row
from tasktop.logging_config import setup_logging
from tasktop.monitor import SnapshotSource

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None, config: MonitorConfig | None = None) -> argparse.Namespace:
    """Parse command-line arguments, taking defaults from the config."""
    if config is None:
        config = MonitorConfig()

    parser = argparse.ArgumentParser(prog="tasktop", description="A CLI-based Linux task manager")
    parser.add_argument("--log-level", default=config.log_level, help="Logging level")
    parser.add_argument("--log-file", default=config.log_file, help="Optional log file path")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List all running processes")
    # Validated after parsing so an unknown field exits with status 1
    list_parser.add_argument(
        "-s", "--sort-by", default="pid", help="Sort by field: pid, cpu, memory, command"
    )
    list_parser.add_argument(
        "-o", "--order", default="asc", choices=["asc", "desc"], help="Sort order"
    )
    list_parser.add_argument("-f", "--filter", default=None, help="Filter by command name or PID")
    list_parser.add_argument(
        "--sample-interval",
        type=float,
        default=0.5,
        help="Seconds to measure per-process CPU over (0 skips the second sample)",
    )

    kill_parser = subparsers.add_parser("kill", help="Kill a process by PID")
    kill_parser.add_argument("-p", "--pid", type=int, required=True, help="PID of the process to kill")
    kill_parser.add_argument(
        "-s", "--signal", default=DEFAULT_SIGNAL, help="Signal to send: SIGTERM, SIGKILL or SIGHUP"
    )

    top_parser = subparsers.add_parser("top", help="Interactive process monitor")
    top_parser.add_argument(
        "--poll-rate", type=float, default=config.poll_rate, help="Refresh interval in seconds"
    )
    top_parser.add_argument(
        "--spike-threshold",
        type=float,
        default=config.spike_threshold,
        help="Percent change between samples flagged as a spike",
    )

    return parser.parse_args(argv)


def run_list(args: argparse.Namespace, source: SnapshotSource | None = None) -> int:
    """Print the filtered, sorted process table."""
    try:
        sort_field = query.parse_sort_field(args.sort_by)
    except InvalidSortField as e:
        print(e, file=sys.stderr)
        return 1
    sort_order = query.parse_sort_order(args.order)

    if source is None:
        source = SnapshotSource()
    try:
        if args.sample_interval > 0:
            # First per-process CPU reading is always 0.0
            source.refresh_processes()
            time.sleep(args.sample_interval)
        processes = source.refresh_processes()
    except SnapshotError as e:
        print(e, file=sys.stderr)
        return 1

    view = query.apply(processes, args.filter, sort_field, sort_order)
    print(TABLE_HEADER)
    for sample in view:
        print(format_row(sample))
    return 0


def run_kill(args: argparse.Namespace, control: ProcessControl | None = None) -> int:
    """Send a signal to one process."""
    if control is None:
        control = ProcessControl()
    try:
        control.kill(args.pid, args.signal)
    except KillError as e:
        print(e, file=sys.stderr)
        return 1
    print(f"Successfully sent {args.signal} to PID {args.pid}")
    return 0


def run_top(args: argparse.Namespace, config: MonitorConfig) -> int:
    """Run the interactive display."""
    config.poll_rate = args.poll_rate
    config.spike_threshold = args.spike_threshold
    run_app(config)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the tasktop command."""
    try:
        config = MonitorConfig.from_env()
    except ValueError as e:
        print(e, file=sys.stderr)
        return 2

    args = parse_args(argv, config)
    config.log_level = args.log_level
    config.log_file = args.log_file
    try:
        setup_logging(config.log_level, config.log_file, tui=args.command == "top")
    except (ValueError, OSError) as e:
        print(e, file=sys.stderr)
        return 2
    logger.debug("Running %s with %s", args.command, args)

    if args.command == "list":
        return run_list(args)
    if args.command == "kill":
        return run_kill(args)
    return run_top(args, config)


if __name__ == "__main__":
    sys.exit(main())
