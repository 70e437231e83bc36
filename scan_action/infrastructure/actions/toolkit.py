# File: scan_action/infrastructure/actions/toolkit.py
# Purpose: Workflow commands understood by the GitHub Actions runner (outputs, failure, debug, groups)
import os
import sys
import uuid
from datetime import datetime
from typing import Optional, TextIO


def _stream(stream: Optional[TextIO]) -> TextIO:
    return stream if stream is not None else sys.stdout


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def format_command(command: str, message: str = "", properties: Optional[dict[str, str]] = None) -> str:
    """
    Render a workflow command line.

    Args:
        command: Command name (debug, error, set-output, ...)
        message: Command payload, escaped so it stays on one line
        properties: Optional ``key=value`` properties

    Returns:
        ``::command key=value::message``
    """
    line = f"::{command}"
    if properties:
        rendered = ",".join(
            f"{key}={escape_property(str(value))}" for key, value in properties.items() if value is not None
        )
        if rendered:
            line += f" {rendered}"
    return f"{line}::{escape_data(message)}"


def issue_command(
    command: str,
    message: str = "",
    properties: Optional[dict[str, str]] = None,
    stream: Optional[TextIO] = None,
) -> None:
    out = _stream(stream)
    out.write(format_command(command, message, properties) + os.linesep)
    out.flush()


def debug(message: str, stream: Optional[TextIO] = None) -> None:
    issue_command("debug", message, stream=stream)


def warning(message: str, stream: Optional[TextIO] = None) -> None:
    issue_command("warning", message, stream=stream)


def error(message: str, stream: Optional[TextIO] = None) -> None:
    issue_command("error", message, stream=stream)


def start_group(name: str, stream: Optional[TextIO] = None) -> None:
    issue_command("group", name, stream=stream)


def end_group(stream: Optional[TextIO] = None) -> None:
    issue_command("endgroup", stream=stream)


def set_output(
    name: str,
    value: str,
    output_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Publish a step output.

    Appends to the runner's output file when one is available (a heredoc
    block with a random delimiter for multi-line values), otherwise falls
    back to the legacy ``set-output`` command on stdout.

    Args:
        name: Output name
        value: Output value
        output_file: Path from ``GITHUB_OUTPUT``; read from the environment when omitted
        stream: Fallback stream for the legacy command
    """
    path = output_file if output_file is not None else os.environ.get("GITHUB_OUTPUT", "")
    if not path:
        out = _stream(stream)
        out.write(os.linesep)
        issue_command("set-output", value, {"name": name}, stream=out)
        return

    if "\n" in value or "\r" in value:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        if delimiter in name or delimiter in value:
            raise ValueError("Unexpected input: name or value contains the output delimiter")
        entry = f"{name}<<{delimiter}{os.linesep}{value}{os.linesep}{delimiter}"
    else:
        entry = f"{name}={value}"

    with open(path, "a", encoding="utf-8") as f:
        f.write(entry + os.linesep)


def set_failed(message: str, stream: Optional[TextIO] = None) -> int:
    """Report a failed step; returns the exit status the process should use."""
    error(message, stream=stream)
    return 1


def time_of_day(now: Optional[datetime] = None) -> str:
    """Local time-of-day text, e.g. ``14:03:27 GMT+0000 (UTC)``."""
    moment = (now or datetime.now()).astimezone()
    return moment.strftime("%H:%M:%S GMT%z (%Z)")
