# File: scan_action/infrastructure/logging/setup.py
# Purpose: Structured logging setup for Actions log output, JSON lines and an optional rotating file
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, TextIO

import structlog
from pythonjsonlogger import jsonlogger

from scan_action.infrastructure.logging.formatters import GitHubActionsRenderer


def _json_formatter() -> jsonlogger.JsonFormatter:
    return jsonlogger.JsonFormatter(
        "%(asctime)s %(name)s %(levelname)s %(message)s",
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger"
        }
    )


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "github",
    log_dir: str = "",
    app_name: str = "scan_action",
    stream: Optional[TextIO] = None,
) -> structlog.BoundLogger:
    """
    Setup structured logging with:
    - Actions workflow-command rendering (``github``) or JSON lines (``json``)
    - Optional size-rotated JSON log file
    - Context variables support for run tracking

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: ``github`` or ``json``
        log_dir: Directory for a rotating JSON log file; empty disables it
        app_name: Application name for logger identification
        stream: Console stream, stdout by default

    Returns:
        Configured structlog logger instance
    """
    shared_processors = [
        # Add context variables (like image, run_id)
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
    ]

    if log_format == "json":
        # python-json-logger renders name, level and time; exc_info is left to stdlib
        processors = shared_processors + [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.render_to_log_kwargs,
        ]
        console_formatter: logging.Formatter = _json_formatter()
    else:
        processors = shared_processors + [
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            GitHubActionsRenderer(),
        ]
        console_formatter = logging.Formatter("%(message)s")

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # Reconfigured per run; cached loggers would keep stale processors
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level.upper())

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(logging.DEBUG)
    root_logger.addHandler(console_handler)

    handlers = ["console"]
    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        # File handler - rotated by size, keep 5 files
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_path / f"{app_name}.log",
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8"
        )
        file_handler.setFormatter(_json_formatter())
        file_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(file_handler)
        handlers.append("file")

    logger = structlog.get_logger(app_name)
    logger.debug(
        "logging_initialized",
        log_level=log_level,
        log_format=log_format,
        handlers=handlers,
    )

    return logger
