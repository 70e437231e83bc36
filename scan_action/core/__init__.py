# File: scan_action/core/__init__.py
# Purpose: Command runner, validation and error types
from scan_action.core.command_runner import CommandRunner, InvocationResult, InvocationSpec
from scan_action.core.errors import (
    CommandTimeoutError,
    InvalidInputError,
    NonZeroExitError,
    RunError,
    ScanActionError,
    SpawnError,
)
from scan_action.core.validators import ImageReference, parse_image_reference

__all__ = [
    "CommandRunner",
    "InvocationSpec",
    "InvocationResult",
    "ScanActionError",
    "InvalidInputError",
    "RunError",
    "SpawnError",
    "CommandTimeoutError",
    "NonZeroExitError",
    "ImageReference",
    "parse_image_reference",
]
