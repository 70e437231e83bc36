# File: scan_action/core/command_runner.py
# Purpose: Execute an external command as discrete argv tokens with captured output and timeout control
from __future__ import annotations

import asyncio
import os
import shlex
import signal
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

from scan_action.core.command_paths import is_executable, resolve_command
from scan_action.core.errors import CommandTimeoutError, SpawnError

logger = structlog.get_logger(__name__)

_READ_CHUNK = 64 * 1024


class InvocationSpec(BaseModel):
    """
    A single external command.

    The executable and every argument stay separate argv entries all the way
    to the child process. No shell is involved, so metacharacters inside an
    argument are passed through literally.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    executable: StrictStr = Field(min_length=1)
    arguments: tuple[StrictStr, ...] = ()
    working_directory: Path = Path(".")
    env: dict[StrictStr, StrictStr] = Field(default_factory=dict)

    @field_validator("executable", "arguments")
    @classmethod
    def reject_nul_bytes(cls, value):
        tokens = (value,) if isinstance(value, str) else value
        if any("\x00" in token for token in tokens):
            raise ValueError("argv tokens must not contain NUL bytes")
        return value

    @property
    def argv(self) -> list[str]:
        return [self.executable, *self.arguments]

    def display(self) -> str:
        """Shell-quoted rendering for logs only."""
        return shlex.join(self.argv)


@dataclass(frozen=True)
class InvocationResult:
    argv: tuple[str, ...]
    exit_code: int
    stdout: str
    stderr: str
    duration_ms: float
    pid: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class CommandRunner:
    """
    Run one child process per call and return its captured result.

    A non-zero exit code is returned, not raised. Spawn failures raise
    SpawnError; an exceeded deadline kills the child's whole process group
    and raises CommandTimeoutError with the partial output attached.
    """

    def __init__(self, default_timeout_s: Optional[float] = None) -> None:
        self.default_timeout_s = default_timeout_s

    def run(self, spec: InvocationSpec, timeout_s: Optional[float] = None) -> InvocationResult:
        timeout_s = self._effective_timeout(timeout_s)
        argv, cwd, env = self._prepare(spec)

        started = time.monotonic()
        try:
            proc = subprocess.Popen(
                argv,
                cwd=cwd,
                env=env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as exc:
            raise SpawnError(f"Failed to start {argv[0]}: {exc.strerror or exc}", argv) from exc

        logger.debug("command_started", command=spec.display(), cwd=cwd, pid=proc.pid)

        with proc:
            try:
                stdout, stderr = proc.communicate(timeout=timeout_s)
            except subprocess.TimeoutExpired:
                _kill_process_group(proc)
                stdout, stderr = proc.communicate()
                result = _build_result(argv, proc.returncode, stdout, stderr, started, proc.pid)
                raise self._timeout_error(argv, timeout_s, result)
            except BaseException:
                _kill_process_group(proc)
                proc.wait()
                raise

        result = _build_result(argv, proc.returncode, stdout, stderr, started, proc.pid)
        self._log_finished(result)
        return result

    async def run_async(self, spec: InvocationSpec, timeout_s: Optional[float] = None) -> InvocationResult:
        timeout_s = self._effective_timeout(timeout_s)
        argv, cwd, env = self._prepare(spec)

        started = time.monotonic()
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                cwd=cwd,
                env=env,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as exc:
            raise SpawnError(f"Failed to start {argv[0]}: {exc.strerror or exc}", argv) from exc

        logger.debug("command_started", command=spec.display(), cwd=cwd, pid=proc.pid)

        stdout, stderr = bytearray(), bytearray()
        # Shielded so a timeout leaves the readers running until the killed child's pipes close.
        completion = asyncio.gather(_drain(proc.stdout, stdout), _drain(proc.stderr, stderr), proc.wait())
        try:
            await asyncio.wait_for(asyncio.shield(completion), timeout=timeout_s)
        except asyncio.TimeoutError:
            _kill_process_group(proc)
            await completion
            result = _build_result(argv, proc.returncode, bytes(stdout), bytes(stderr), started, proc.pid)
            raise self._timeout_error(argv, timeout_s, result)
        except BaseException:
            completion.cancel()
            _kill_process_group(proc)
            await proc.wait()
            raise

        result = _build_result(argv, proc.returncode, bytes(stdout), bytes(stderr), started, proc.pid)
        self._log_finished(result)
        return result

    def _effective_timeout(self, timeout_s: Optional[float]) -> Optional[float]:
        if timeout_s is None:
            timeout_s = self.default_timeout_s
        if timeout_s is not None and timeout_s <= 0:
            return None
        return timeout_s

    def _prepare(self, spec: InvocationSpec) -> tuple[list[str], str, dict[str, str]]:
        # Absolute, so a relative executable cannot fall back to a PATH lookup in the child.
        cwd = spec.working_directory.expanduser().resolve()
        if not cwd.is_dir():
            raise SpawnError(f"Working directory does not exist: {cwd}", spec.argv)

        env = {**os.environ, **spec.env}
        executable = resolve_command(spec.executable, cwd, env)
        if executable is None:
            raise SpawnError(f"Executable not found: {spec.executable}", spec.argv)
        if not is_executable(executable):
            raise SpawnError(f"Executable is not runnable: {executable}", spec.argv)

        return [executable, *spec.arguments], str(cwd), env

    def _timeout_error(
        self, argv: list[str], timeout_s: Optional[float], result: InvocationResult
    ) -> CommandTimeoutError:
        logger.warning(
            "command_timed_out",
            executable=argv[0],
            timeout_s=timeout_s,
            pid=result.pid,
            duration_ms=result.duration_ms,
        )
        return CommandTimeoutError(
            f"Command timed out after {timeout_s}s: {argv[0]}",
            argv,
            timeout_s=timeout_s or 0.0,
            result=result,
        )

    def _log_finished(self, result: InvocationResult) -> None:
        logger.debug(
            "command_finished",
            executable=result.argv[0],
            exit_code=result.exit_code,
            duration_ms=result.duration_ms,
            pid=result.pid,
        )


async def _drain(stream: asyncio.StreamReader, sink: bytearray) -> None:
    while True:
        chunk = await stream.read(_READ_CHUNK)
        if not chunk:
            return
        sink.extend(chunk)


def _kill_process_group(proc) -> None:
    # The child leads its own session, so its pid is also the process group id.
    if os.name == "posix":
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
    else:
        proc.kill()


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


def _build_result(
    argv: list[str],
    returncode: Optional[int],
    stdout: Optional[bytes],
    stderr: Optional[bytes],
    started: float,
    pid: Optional[int],
) -> InvocationResult:
    return InvocationResult(
        argv=tuple(argv),
        exit_code=returncode if returncode is not None else -1,
        stdout=_decode(stdout),
        stderr=_decode(stderr),
        duration_ms=round((time.monotonic() - started) * 1000, 2),
        pid=pid,
    )
