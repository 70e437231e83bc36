# File: scan_action/services/diagnostics.py
# Purpose: Pre-scan dump of the runner workspace (directory listing, cwd, redacted environment)
from pathlib import Path
from typing import Optional

import structlog

from scan_action.core.command_runner import CommandRunner, InvocationSpec
from scan_action.core.errors import RunError
from scan_action.infrastructure.actions import toolkit
from scan_action.infrastructure.logging.formatters import SensitiveDataFilter, parse_env_dump

logger = structlog.get_logger(__name__)

DIAGNOSTIC_COMMANDS: list[tuple[str, list[str]]] = [
    ("ls", ["ls", "-la"]),
    ("pwd", ["pwd"]),
    ("env", ["env"]),
]

DIAGNOSTIC_TIMEOUT_S = 10


def run_diagnostics(
    runner: CommandRunner,
    working_directory: Path,
    env: Optional[dict[str, str]] = None,
) -> dict[str, str]:
    """
    Run the diagnostic commands in the scanner's working directory.

    A failing command is logged and skipped; the scan itself still runs.
    The ``env`` listing is redacted before it is logged or returned.

    Returns:
        Mapping of diagnostic name to the output that was logged
    """
    collected: dict[str, str] = {}
    toolkit.start_group("Runner diagnostics")
    try:
        for name, argv in DIAGNOSTIC_COMMANDS:
            spec = InvocationSpec(
                executable=argv[0],
                arguments=argv[1:],
                working_directory=working_directory,
                env=env or {},
            )
            try:
                result = runner.run(spec, timeout_s=DIAGNOSTIC_TIMEOUT_S)
            except RunError as e:
                logger.warning("diagnostic_failed", command=name, error=str(e), error_type=type(e).__name__)
                continue

            output = result.stdout
            if name == "env":
                redacted = SensitiveDataFilter.redact(parse_env_dump(output))
                output = "\n".join(f"{key}={value}" for key, value in sorted(redacted.items()))

            collected[name] = output
            logger.info("diagnostic_output", command=name, exit_code=result.exit_code, output=output)
    finally:
        toolkit.end_group()

    return collected
