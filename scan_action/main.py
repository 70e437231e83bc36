# File: scan_action/main.py
# Purpose: Action entry point: settings -> logging -> scan -> completion time output
import argparse
import sys
from typing import Optional, Sequence

import structlog

from scan_action import __version__
from scan_action.config import Settings, load_settings
from scan_action.core.errors import InvalidInputError
from scan_action.error_handler import handle_exception
from scan_action.infrastructure.actions import toolkit
from scan_action.infrastructure.logging.setup import setup_logging
from scan_action.services.scan_service import ScanService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scan-action",
        description="Scan a container image with the inline scanner and report the completion time.",
    )
    parser.add_argument("--image-reference", help="Image to scan (overrides INPUT_IMAGE_REFERENCE)")
    parser.add_argument("--timeout", type=float, help="Scanner timeout in seconds (overrides INPUT_TIMEOUT_SECONDS)")
    parser.add_argument("--working-directory", help="Scanner working directory (overrides WORKING_DIRECTORY)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _overrides(args: argparse.Namespace) -> dict:
    overrides = {}
    if args.image_reference is not None:
        overrides["INPUT_IMAGE_REFERENCE"] = args.image_reference
    if args.timeout is not None:
        overrides["INPUT_TIMEOUT_SECONDS"] = args.timeout
    if args.working_directory is not None:
        overrides["WORKING_DIRECTORY"] = args.working_directory
    return overrides


def run(settings: Settings) -> int:
    """Scan once and publish the ``time`` output; returns the exit status."""
    try:
        logger = setup_logging(
            log_level=settings.effective_log_level,
            log_format=settings.LOG_FORMAT,
            log_dir=settings.LOG_DIR,
            app_name="scan_action",
        )
    except OSError as e:
        # Log file unusable: report on the console only
        setup_logging(log_level=settings.effective_log_level, log_format=settings.LOG_FORMAT)
        return handle_exception(e)
    structlog.contextvars.clear_contextvars()
    if settings.GITHUB_RUN_ID:
        structlog.contextvars.bind_contextvars(run_id=settings.GITHUB_RUN_ID)

    try:
        report = ScanService(settings).scan()
        completed = toolkit.time_of_day(report.completed_at)
        logger.debug("completion_time", time=completed)
        toolkit.set_output("time", completed, output_file=settings.GITHUB_OUTPUT)
    except Exception as e:
        return handle_exception(e)
    finally:
        structlog.contextvars.clear_contextvars()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings(**_overrides(args))
    except InvalidInputError as e:
        setup_logging()
        return handle_exception(e)
    return run(settings)


if __name__ == "__main__":
    sys.exit(main())
