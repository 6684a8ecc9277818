"""Command line interface for the continuous security monitor."""

import argparse
import logging
import signal
import sys
import threading

from security_monitor import __version__
from security_monitor.config import load_config, resolve_log_level
from security_monitor.errors import ConcurrentScanRejected, InvalidConfiguration, InvalidTargetRoot
from security_monitor.monitor import SecurityMonitor

logger = logging.getLogger(__name__)


def build_parser():
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="security-monitor",
        description=(
            "Continuous security monitor - scan source trees for suspicious keywords, "
            "hardcoded credentials and dangerous execution calls."
        ),
        epilog="Example: security-monitor --root ./my-project start 30",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--root",
        default=None,
        help="Target directory to monitor (default: current directory).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a JSON config file (default: $SECURITY_MONITOR_CONFIG).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: $SECURITY_MONITOR_LOG_LEVEL or INFO).",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("scan", help="Perform a single scan cycle and print the report.")

    start_parser = subparsers.add_parser("start", help="Start continuous monitoring until interrupted.")
    start_parser.add_argument(
        "interval",
        nargs="?",
        type=positive_int,
        default=None,
        help="Seconds between scans, at least 1 (default: 60).",
    )

    subparsers.add_parser("stop", help="Stop monitoring.")
    subparsers.add_parser("status", help="Show monitor status.")
    subparsers.add_parser("test", help="Send a test alert through every sink.")

    return parser


def positive_int(value: str) -> int:
    """argparse type for intervals of at least one second."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid interval: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"interval must be at least 1 second, got {number}")
    return number


def _run_until_interrupted(
    monitor: SecurityMonitor,
    interval: int | None,
    shutdown: threading.Event | None = None,
) -> int:
    """Monitor until SIGINT/SIGTERM, then stop the timer and flush alerts."""
    if shutdown is None:
        shutdown = threading.Event()

    def _handle_signal(signum, frame):
        logger.info("Shutting down security monitor...")
        shutdown.set()

    previous = {sig: signal.signal(sig, _handle_signal) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        monitor.start(interval)
        while not shutdown.wait(1.0):
            pass
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
        monitor.close()
    return 0


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    logging.basicConfig(level=resolve_log_level(args.log_level))

    try:
        config = load_config(args.config, target_root=args.root)
        monitor = SecurityMonitor(config)
    except (InvalidConfiguration, InvalidTargetRoot) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.command == "start":
        try:
            return _run_until_interrupted(monitor, args.interval)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    try:
        if args.command == "scan":
            report = monitor.scan_once()
            print(report.model_dump_json(indent=2))
        elif args.command == "stop":
            # Monitoring state lives in the process that started it
            monitor.stop()
        elif args.command == "status":
            print(monitor.status().model_dump_json(indent=2))
        elif args.command == "test":
            finding = monitor.generate_test_finding()
            print(finding.model_dump_json(indent=2))
    except ConcurrentScanRejected as e:
        print(f"Busy: {e}", file=sys.stderr)
        return 2
    finally:
        monitor.close()

    return 0
