"""mon: probe the HTTP services listed in a services file and report status.

Services answering 200 are up; anything else, including an unreachable host,
is reported as down. Output is a table (default), a JSON array, or one desktop
notification per failing service.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import IO, Sequence

from mon.config import settings
from mon.errors import MonError, ServicesFileError
from mon.log import setup_logging
from mon.notifier import NOTIFIER_KINDS, build_notifier
from mon.registry import default_services_path, load_services
from mon.reporting import OutputMode, report
from mon.runner import run_once

logger = logging.getLogger("mon.main")


def positive_seconds(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number of seconds: {value!r}") from None
    if not 0 < seconds < float("inf"):
        raise argparse.ArgumentTypeError(f"timeout must be a positive number of seconds, got {value}")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mon",
        description="Check HTTP services listed in a services file.",
    )
    parser.add_argument(
        "-s",
        "--services-file",
        help="full path to services file",
    )
    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="whether to display output as JSON",
    )
    output.add_argument(
        "--notify",
        action="store_true",
        help="whether to display service issues as notifications",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=positive_seconds,
        default=str(settings.MON_PROBE_TIMEOUT_SECONDS),
        help="per-service timeout in seconds (default: %(default)s)",
    )
    parser.add_argument(
        "--notifier",
        choices=NOTIFIER_KINDS,
        default=settings.MON_NOTIFIER,
        help="notification backend used with --notify (default: %(default)s)",
    )
    parser.add_argument(
        "--log-level",
        default=settings.MON_LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
    )
    return parser


def output_mode(args: argparse.Namespace) -> OutputMode:
    if args.json:
        return OutputMode.JSON
    if args.notify:
        return OutputMode.NOTIFY
    return OutputMode.TABLE


def main(argv: Sequence[str] | None = None, out: IO[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    out = out if out is not None else sys.stdout

    path = args.services_file or settings.MON_SERVICES_FILE
    if not path:
        try:
            path = default_services_path()
        except OSError as e:
            logger.error("unable to obtain config directory", extra={"error": str(e)})
            return 1

    try:
        services = load_services(path)
    except ServicesFileError as e:
        logger.error(e.reason, extra={"file": e.path})
        return 1

    results = run_once(services, timeout_s=args.timeout)

    mode = output_mode(args)
    try:
        notifier = build_notifier(args.notifier) if mode is OutputMode.NOTIFY else None
        report(results, mode, out, notifier=notifier)
        out.flush()
    except (MonError, OSError, UnicodeError) as e:
        logger.error("unable to report results", extra={"error": str(e)})
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
