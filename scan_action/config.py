# File: scan_action/config.py
# Purpose: Action configuration read from the CI environment with pydantic-settings
from typing import Literal, Optional

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings import SettingsError

from scan_action.core.errors import InvalidInputError


class Settings(BaseSettings):
    """
    Action settings.

    The CI runner exposes each declared action input as an ``INPUT_<NAME>``
    environment variable; everything else is runner or deployment config.
    """
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_ignore_empty=True,
        extra="ignore"
    )

    # Action inputs
    INPUT_IMAGE_REFERENCE: str = ""
    INPUT_TIMEOUT_SECONDS: float = 0
    INPUT_FAIL_ON_SCANNER_EXIT: bool = True
    INPUT_DEBUG_DIAGNOSTICS: bool = False

    # Scanner invocation
    # The scanner is provisioned next to the working directory before the step runs.
    SCANNER_PATH: str = "./inline_scan-v0.5.0"
    SCANNER_ARGS: list[str] = []
    SCANNER_ENV: dict[str, str] = {}
    WORKING_DIRECTORY: str = "."

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["github", "json"] = "github"
    LOG_DIR: str = ""

    # Runner environment
    GITHUB_OUTPUT: str = ""
    GITHUB_RUN_ID: str = ""
    RUNNER_DEBUG: str = ""

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @property
    def debug_enabled(self) -> bool:
        return self.RUNNER_DEBUG == "1"

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug_enabled else self.LOG_LEVEL

    @property
    def diagnostics_enabled(self) -> bool:
        return self.INPUT_DEBUG_DIAGNOSTICS or self.debug_enabled

    @property
    def timeout_s(self) -> Optional[float]:
        """Scanner deadline in seconds, None when unlimited"""
        return self.INPUT_TIMEOUT_SECONDS if self.INPUT_TIMEOUT_SECONDS > 0 else None


def load_settings(**overrides) -> Settings:
    """
    Build settings, reporting bad values as an input error.

    Args:
        **overrides: Field values taking precedence over the environment

    Returns:
        Validated Settings instance

    Raises:
        InvalidInputError: If any value fails validation
    """
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(part) for part in err["loc"]) for err in exc.errors())
        raise InvalidInputError(f"Invalid configuration value for: {fields}") from exc
    except SettingsError as exc:
        raise InvalidInputError(str(exc)) from exc

