# File: tests/test_logging.py
# Purpose: Redaction, env parsing, Actions rendering and logging setup.
import io
import json

import pytest
import structlog

from scan_action.infrastructure.logging.formatters import (
    REDACTED,
    GitHubActionsRenderer,
    SensitiveDataFilter,
    parse_env_dump,
)
from scan_action.infrastructure.logging.setup import setup_logging


def test_redact_nested_structures():
    data = {
        "GITHUB_TOKEN": "ghs_abc",
        "nested": {"registry_password": "p", "user": "ci"},
        "items": [{"api_key": "k"}, "plain"],
        "PWD": "/home/runner/work",
    }

    redacted = SensitiveDataFilter.redact(data)

    assert redacted["GITHUB_TOKEN"] == REDACTED
    assert redacted["nested"] == {"registry_password": REDACTED, "user": "ci"}
    assert redacted["items"] == [{"api_key": REDACTED}, "plain"]
    assert redacted["PWD"] == "/home/runner/work"


@pytest.mark.parametrize(
    "key",
    ["REGISTRY_AUTH", "HTTP_AUTHORIZATION", "ANCHORE_CLI_PASS", "registryPassword", "docker.auth.token", "NPM_TOKENS"],
)
def test_sensitive_name_segments_are_redacted(key):
    assert SensitiveDataFilter.redact({key: "value"}) == {key: REDACTED}


@pytest.mark.parametrize(
    "key",
    ["GITHUB_AUTHOR", "COMMIT_AUTHOR_NAME", "PWD", "OLDPWD", "PASSENGER_COUNT", "TOKENIZER_MODEL"],
)
def test_names_merely_containing_a_sensitive_word_are_kept(key):
    assert SensitiveDataFilter.redact({key: "value"}) == {key: "value"}


def test_parse_env_dump_handles_multiline_values():
    dump = "HOME=/root\nCERT=-----BEGIN-----\nabc\n-----END-----\nEMPTY=\nEQ=a=b\n"

    parsed = parse_env_dump(dump)

    assert parsed == {
        "HOME": "/root",
        "CERT": "-----BEGIN-----\nabc\n-----END-----",
        "EMPTY": "",
        "EQ": "a=b",
    }


def test_renderer_info_is_plain_line():
    line = GitHubActionsRenderer()(None, "info", {"event": "scanner_output", "level": "info", "exit_code": 0, "stdout": "OK alpine:latest\n", "timestamp": "t"})

    assert line == "scanner_output exit_code=0\nOK alpine:latest"


def test_renderer_debug_becomes_single_line_command():
    line = GitHubActionsRenderer()(None, "debug", {"event": "scan_started", "level": "debug", "at": "10:00"})

    assert line == "::debug::scan_started at=10:00"


def test_renderer_warning_escapes_block():
    line = GitHubActionsRenderer()(None, "warning", {"event": "scanner_stderr", "level": "warning", "stderr": "a\nb"})

    assert line == "::warning::scanner_stderr%0Aa%0Ab"
    assert "\n" not in line


def test_setup_logging_github_format():
    stream = io.StringIO()
    setup_logging(log_level="DEBUG", log_format="github", stream=stream)

    structlog.get_logger("test").info("hello", image="alpine")
    structlog.get_logger("test").debug("detail")

    lines = stream.getvalue().splitlines()
    assert "hello image=alpine" in lines
    assert "::debug::detail" in lines


def test_setup_logging_respects_level():
    stream = io.StringIO()
    setup_logging(log_level="INFO", stream=stream)

    structlog.get_logger("test").debug("hidden")

    assert "hidden" not in stream.getvalue()


def test_setup_logging_json_format_and_context():
    stream = io.StringIO()
    setup_logging(log_level="INFO", log_format="json", stream=stream)
    structlog.contextvars.bind_contextvars(run_id="42")

    structlog.get_logger("scan").info("scanner_output", exit_code=0)

    record = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert record["message"] == "scanner_output"
    assert record["exit_code"] == 0
    assert record["run_id"] == "42"
    assert record["level"] == "INFO"
    assert record["logger"] == "scan"


def test_setup_logging_writes_rotating_file(tmp_path):
    setup_logging(log_level="INFO", log_dir=str(tmp_path / "logs"), stream=io.StringIO())

    structlog.get_logger("scan").info("to_file")

    content = (tmp_path / "logs" / "scan_action.log").read_text(encoding="utf-8")
    assert "to_file" in content
