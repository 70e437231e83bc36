# File: scan_action/error_handler.py
# Purpose: Convert any error raised during a run into a single failed-step report
from typing import Optional, TextIO

import structlog

from scan_action.core.errors import (
    CommandTimeoutError,
    NonZeroExitError,
    ScanActionError,
)
from scan_action.infrastructure.actions import toolkit

logger = structlog.get_logger(__name__)


def handle_exception(exc: BaseException, stream: Optional[TextIO] = None) -> int:
    """
    Report an error as a failed step.

    - Known action errors are logged with their type and context
    - Unexpected exceptions are logged with the full traceback
    - The error's description becomes the failure message

    Args:
        exc: Exception that ended the run
        stream: Stream for the failure command, stdout by default

    Returns:
        Exit status for the process
    """
    context = {"error": str(exc), "error_type": type(exc).__name__}

    if isinstance(exc, NonZeroExitError):
        context["exit_code"] = exc.exit_code
    elif isinstance(exc, CommandTimeoutError):
        context["timeout_s"] = exc.timeout_s
        if exc.result is not None and exc.result.stdout:
            # Partial scanner output is still useful for diagnosis
            logger.info("scanner_output_partial", stdout=exc.result.stdout)
        if exc.result is not None and exc.result.stderr.strip():
            logger.warning("scanner_stderr", stderr=exc.result.stderr)

    if isinstance(exc, ScanActionError):
        logger.debug("run_failed", **context)
    else:
        logger.debug("unhandled_exception", exc_info=exc, **context)

    return toolkit.set_failed(str(exc) or type(exc).__name__, stream=stream)
