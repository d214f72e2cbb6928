"""
Climatiseur command line.

    climatiseur [scan] [--dry-run] [--verbose] [--log | --no-log]
"""

import argparse
import os
import sys
from typing import Optional

from core.climatiseur.exceptions import ConfigurationError
from core.climatiseur.mailer import Mailer
from core.climatiseur.models import ScanResult, STATUS_ERROR
from core.climatiseur.scanner import ClimateScanner
from core.climatiseur.settings import load_settings
from core.climatiseur.telemetry import ClimateTelemetry

from .log_config import LOGFILE, configure_logging


def _add_options(parser: argparse.ArgumentParser, suppress: bool = False) -> None:
    """Add the run options; the subcommand copy must not reset the top-level values."""

    def default(value):
        return argparse.SUPPRESS if suppress else value

    parser.add_argument(
        "--log",
        action=argparse.BooleanOptionalAction,
        default=default(True),
        help=f"log output to {LOGFILE}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", default=default(False), help="increase verbosity"
    )
    parser.add_argument(
        "-n", "--dry-run", action="store_true", default=default(False), help="don't send notifications"
    )
    parser.add_argument("--credentials", default=default(None), help="credentials YAML file")
    parser.add_argument(
        "--logfile", default=default(os.environ.get("CLIMATISEUR_LOGFILE")), help=argparse.SUPPRESS
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="climatiseur",
        description="Warn when open (or closed) doors and windows work against the thermostat.",
    )
    _add_options(parser)

    subparsers = parser.add_subparsers(dest="command")
    scan = subparsers.add_parser("scan", help="check thermostat, temperatures and portals")
    _add_options(scan, suppress=True)
    parser.set_defaults(command="scan")
    return parser


def scan(dry_run: bool, credentials: Optional[str], log) -> ScanResult:
    """Load settings, wire collaborators and run one scan."""
    try:
        settings = load_settings(credentials)
    except ConfigurationError as e:
        log.error(str(e))
        return ScanResult(status=STATUS_ERROR, detail=str(e))

    scanner = ClimateScanner(
        settings,
        ClimateTelemetry.from_settings(settings),
        Mailer(settings.mail_delivery_defaults),
        logger=log,
    )
    return scanner.scan(dry_run=dry_run)


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point. Always exits 0; every outcome is recorded in the log."""
    args = build_parser().parse_args(argv)

    with configure_logging(verbose=args.verbose, log_to_file=args.log, logfile=args.logfile) as log:
        log.info("starting")
        try:
            result = scan(args.dry_run, args.credentials, log)
            log.debug(f"scan finished with status '{result.status}'")
        except Exception as e:
            log.exception(f"Unexpected error: {e}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
