# File: scan_action/core/command_paths.py
# Purpose: Resolve an executable name or path before spawning it
import os
import shutil
from pathlib import Path
from typing import Mapping, Optional


def resolve_command(
    command_name: str,
    working_directory: Path,
    env: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """
    Resolve the full path of a command.

    A name containing a path separator is taken relative to the working
    directory; a bare name is looked up on the PATH the child will see.

    Args:
        command_name: Command name or path
        working_directory: Directory the child process will run in
        env: Environment of the child process (PATH is read from here)

    Returns:
        Absolute path of an executable file, or None when nothing matches
    """
    if not command_name:
        return None

    has_separator = os.sep in command_name or (os.altsep and os.altsep in command_name)
    if has_separator:
        candidate = Path(command_name).expanduser()
        if not candidate.is_absolute():
            candidate = working_directory / candidate
        return str(candidate) if candidate.exists() else None

    search_path = (env or os.environ).get("PATH", os.defpath)
    return shutil.which(command_name, path=search_path)


def is_executable(path: str) -> bool:
    return os.path.isfile(path) and os.access(path, os.X_OK)
