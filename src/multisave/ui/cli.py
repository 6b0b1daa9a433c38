from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from pydantic import ValidationError

from multisave.app import PushReport, load_payloads, push_payloads
from multisave.config import (
    ConfigurationError,
    SaveConfig,
    configure_logging,
    get_save_config,
    get_submission_config,
)
from multisave.domain.error_mapping import error_message, format_field_errors

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Save several units as one operation")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    push = subparsers.add_parser("push", help="Submit the units of a payload file")
    push.add_argument(
        "payload_file",
        type=Path,
        help='JSON file shaped like {"units": [{"unit_id", "endpoint", "data"}, ...]}',
    )
    push.add_argument(
        "--base-url",
        type=str,
        help="API base URL (defaults to MULTISAVE_API_BASE_URL)",
    )
    push.add_argument(
        "--timeout",
        type=float,
        help="Seconds each phase may wait for its units (defaults to config)",
    )

    return parser.parse_args(list(argv))


def _save_config(args: argparse.Namespace) -> SaveConfig:
    config = get_save_config()
    if args.timeout is None:
        return config
    if args.timeout <= 0:
        raise ValueError("Timeout must be positive")
    return SaveConfig(
        notification_seconds=config.notification_seconds,
        phase_timeout_seconds=args.timeout,
    )


def _print_report(report: PushReport) -> None:
    if report.unchanged_units:
        print(f"Unchanged, not sent: {', '.join(report.unchanged_units)}")  # noqa: T201
    if report.saved:
        print(f"Saved {len(report.successful_units)} units")  # noqa: T201
        return
    for error in report.validation_errors:
        print(f"{error_message(error)} ({format_field_errors(error.field_errors)})")  # noqa: T201
    for error in report.submission_errors:
        retry = "retryable" if error.retryable else "not retryable"
        print(f"{error_message(error)} [{retry}]")  # noqa: T201
    if report.network_error is not None:
        print(error_message(report.network_error))  # noqa: T201
    if report.successful_units:
        print(f"Saved: {', '.join(report.successful_units)}")  # noqa: T201
    if report.pending_units:
        print(f"Still unsaved: {', '.join(report.pending_units)}")  # noqa: T201


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        payloads = load_payloads(parsed_args.payload_file)
        save_config = _save_config(parsed_args)
        submission_config = get_submission_config(base_url=parsed_args.base_url)
    except (OSError, ValueError, ValidationError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        report = push_payloads(payloads, submission=submission_config, save=save_config)
    except Exception:
        log.exception("Fatal error during push")
        sys.exit(1)

    _print_report(report)
    if not report.saved:
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
