# File: scan_action/services/scan_service.py
# Purpose: Run the image scanner for one image reference and apply the exit-code policy
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import structlog

from scan_action.config import Settings
from scan_action.core.command_runner import CommandRunner, InvocationResult, InvocationSpec
from scan_action.core.errors import NonZeroExitError
from scan_action.core.validators import ImageReference, ensure_directory, parse_image_reference
from scan_action.services.diagnostics import run_diagnostics

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ScanReport:
    image: ImageReference
    result: InvocationResult
    completed_at: datetime


class ScanService:
    """
    Scan one container image with the pre-provisioned scanner.

    The image reference is validated and passed to the scanner as a single
    argv token after any configured scanner arguments.
    """

    def __init__(self, settings: Settings, runner: Optional[CommandRunner] = None) -> None:
        self.settings = settings
        self.runner = runner or CommandRunner(default_timeout_s=settings.timeout_s)

    def build_invocation(self, image: ImageReference) -> InvocationSpec:
        working_directory = ensure_directory(self.settings.WORKING_DIRECTORY)
        return InvocationSpec(
            executable=self.settings.SCANNER_PATH,
            arguments=[*self.settings.SCANNER_ARGS, image.raw],
            working_directory=working_directory,
            env=self.settings.SCANNER_ENV,
        )

    def scan(self, image_reference: Optional[str] = None) -> ScanReport:
        """
        Validate the input, run the scanner and log its output.

        Args:
            image_reference: Image to scan; defaults to the action input

        Returns:
            ScanReport with the scanner's captured result

        Raises:
            InvalidInputError: Empty or malformed image reference or working directory
            SpawnError: Scanner missing or not executable
            CommandTimeoutError: Scanner exceeded the configured timeout
            NonZeroExitError: Scanner failed and the policy treats that as fatal
        """
        raw = image_reference if image_reference is not None else self.settings.INPUT_IMAGE_REFERENCE
        image = parse_image_reference(raw)
        structlog.contextvars.bind_contextvars(image=image.raw)

        spec = self.build_invocation(image)

        if self.settings.diagnostics_enabled:
            run_diagnostics(self.runner, spec.working_directory, env=dict(spec.env))

        logger.debug("scan_started", at=datetime.now().astimezone().isoformat(), command=spec.display())
        result = self.runner.run(spec)
        completed_at = datetime.now().astimezone()
        logger.debug(
            "scan_finished",
            at=completed_at.isoformat(),
            exit_code=result.exit_code,
            duration_ms=result.duration_ms,
        )

        logger.info("scanner_output", exit_code=result.exit_code, stdout=result.stdout)
        # stderr is surfaced even on success so scanner warnings stay visible
        if result.stderr.strip():
            logger.warning("scanner_stderr", stderr=result.stderr)

        if not result.ok and self.settings.INPUT_FAIL_ON_SCANNER_EXIT:
            raise NonZeroExitError(
                f"Scanner exited with status {result.exit_code} for {image.raw}",
                result,
            )

        return ScanReport(image=image, result=result, completed_at=completed_at)
