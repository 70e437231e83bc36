# File: scan_action/infrastructure/logging/formatters.py
# Purpose: Log renderers for the Actions runner and sensitive data redaction
import re
from typing import Any, Iterable, MutableMapping

from scan_action.infrastructure.actions.toolkit import format_command

REDACTED = "***REDACTED***"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_SEGMENT_SPLIT = re.compile(r"[^a-z0-9]+")


class SensitiveDataFilter:
    """
    Filter to redact sensitive information from logs.
    Prevents accidental logging of passwords, registry credentials, tokens, etc.
    """

    # Matched against whole name segments: GITHUB_TOKEN, registryPassword, ANCHORE_CLI_PASS
    SENSITIVE_KEYS = {
        "password",
        "passwords",
        "passwd",
        "pass",
        "passphrase",
        "secret",
        "secrets",
        "api_key",
        "apikey",
        "token",
        "tokens",
        "access_token",
        "refresh_token",
        "authorization",
        "auth",
        "credential",
        "credentials",
        "private_key",
    }

    @classmethod
    def redact(cls, data: Any) -> Any:
        """
        Recursively redact sensitive data from dictionaries and lists.

        Args:
            data: Data to redact (dict, list, or primitive)

        Returns:
            Data with sensitive fields redacted
        """
        if isinstance(data, dict):
            return {
                key: REDACTED if cls._is_sensitive_key(key) else cls.redact(value)
                for key, value in data.items()
            }
        elif isinstance(data, list):
            return [cls.redact(item) for item in data]
        else:
            return data

    @classmethod
    def _is_sensitive_key(cls, key: str) -> bool:
        """Check if a key name indicates sensitive data"""
        # registryPassword -> registry_Password, then split on anything non-alphanumeric
        spaced = _CAMEL_BOUNDARY.sub("_", str(key)).lower()
        normalized = "_" + "_".join(part for part in _SEGMENT_SPLIT.split(spaced) if part) + "_"
        return any(f"_{sensitive}_" in normalized for sensitive in cls.SENSITIVE_KEYS)


def parse_env_dump(text: str) -> dict[str, str]:
    """Parse ``env`` output (``KEY=value`` per line) into a mapping."""
    parsed: dict[str, str] = {}
    last_key = None
    for line in text.splitlines():
        key, sep, value = line.partition("=")
        if sep and key and " " not in key:
            parsed[key] = value
            last_key = key
        elif last_key is not None:
            # Continuation of a multi-line value
            parsed[last_key] += "\n" + line
    return parsed


class GitHubActionsRenderer:
    """
    Final structlog processor producing Actions log lines.

    debug/warning/error events become workflow commands so the runner
    annotates them; info events are printed as plain lines. Multi-line
    values and captured process output are printed as blocks under the
    header line.
    """

    COMMANDS = {
        "debug": "debug",
        "warning": "warning",
        "error": "error",
        "critical": "error",
    }

    def __init__(self, block_keys: Iterable[str] = ("stdout", "stderr", "output")) -> None:
        self.block_keys = set(block_keys)

    def __call__(self, logger: Any, method_name: str, event_dict: MutableMapping[str, Any]) -> str:
        level = str(event_dict.pop("level", method_name)).lower()
        event = str(event_dict.pop("event", ""))
        # The runner stamps every line itself.
        event_dict.pop("timestamp", None)
        event_dict.pop("logger", None)
        exception = event_dict.pop("exception", None)

        fields = []
        blocks = []
        for key, value in event_dict.items():
            if isinstance(value, str) and (key in self.block_keys or "\n" in value):
                blocks.append(value.rstrip("\n"))
            else:
                fields.append(f"{key}={value}")
        if exception:
            blocks.append(str(exception).rstrip("\n"))

        header = " ".join([event, *fields]).strip()
        text = "\n".join([header, *blocks]) if blocks else header

        command = self.COMMANDS.get(level)
        if command is None:
            return text
        return format_command(command, text)
