# File: tests/conftest.py
# Purpose: Provide shared pytest fixtures for runner, service and entry point tests.
import logging
import os
import stat
import sys
from pathlib import Path

import pytest
import structlog

_ENV_PREFIXES = ("INPUT_", "SCANNER_", "LOG_", "GITHUB_", "RUNNER_")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith(_ENV_PREFIXES) or key == "WORKING_DIRECTORY":
            monkeypatch.delenv(key, raising=False)
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


@pytest.fixture()
def make_script(tmp_path):
    def _make(name: str, body: str, executable: bool = True) -> Path:
        path = tmp_path / name
        path.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
        if executable:
            path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _make


@pytest.fixture()
def stub_scanner(make_script):
    """Scanner stand-in that echoes the scanned image."""
    return make_script("scanner", "printf 'OK %s' \"$1\"")


@pytest.fixture()
def python_code():
    """argv prefix running an inline Python snippet with the current interpreter."""
    def _argv(code: str) -> tuple[str, list[str]]:
        return sys.executable, ["-c", code]

    return _argv
