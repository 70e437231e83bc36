# File: scan_action/core/errors.py
# Purpose: Error taxonomy for input validation, process spawning and scanner failures
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from scan_action.core.command_runner import InvocationResult


class ScanActionError(Exception):
    """Base class for every error reported as a failed step."""


class InvalidInputError(ScanActionError):
    """Empty or malformed action input (image reference, settings value)."""


class RunError(ScanActionError):
    """Failure raised by the command runner."""

    def __init__(self, message: str, argv: Optional[list[str]] = None) -> None:
        super().__init__(message)
        self.argv = list(argv or [])


class SpawnError(RunError):
    """The executable could not be found or started."""


class CommandTimeoutError(RunError, TimeoutError):
    """
    The child process exceeded its deadline and was killed.

    ``result`` holds whatever stdout/stderr was captured before termination.
    """

    def __init__(
        self,
        message: str,
        argv: Optional[list[str]] = None,
        timeout_s: float = 0.0,
        result: Optional["InvocationResult"] = None,
    ) -> None:
        super().__init__(message, argv)
        self.timeout_s = timeout_s
        self.result = result


class NonZeroExitError(ScanActionError):
    """The child ran to completion but reported failure."""

    def __init__(self, message: str, result: "InvocationResult") -> None:
        super().__init__(message)
        self.result = result

    @property
    def exit_code(self) -> int:
        return self.result.exit_code
