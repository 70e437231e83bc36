# File: scan_action/infrastructure/logging/__init__.py
# Purpose: Structured logging for the action
from scan_action.infrastructure.logging.setup import setup_logging

__all__ = ["setup_logging"]
