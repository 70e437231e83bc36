# File: scan_action/core/validators.py
# Purpose: Validate and normalize action inputs before they reach a child process
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from scan_action.core.errors import InvalidInputError

# Grammar follows the container distribution reference format:
#   [registry[:port]/]path[:tag][@digest]
_ALNUM = r"[a-z0-9]+"
_SEPARATOR = r"(?:[._]|__|[-]+)"
_PATH_COMPONENT = rf"{_ALNUM}(?:{_SEPARATOR}{_ALNUM})*"
_DOMAIN_COMPONENT = r"(?:[a-zA-Z0-9]|[a-zA-Z0-9][a-zA-Z0-9-]*[a-zA-Z0-9])"
_DOMAIN = rf"{_DOMAIN_COMPONENT}(?:\.{_DOMAIN_COMPONENT})*(?::[0-9]+)?"
_TAG = r"[\w][\w.-]{0,127}"
_DIGEST = r"[A-Za-z][A-Za-z0-9]*(?:[-_+.][A-Za-z][A-Za-z0-9]*)*:[0-9a-fA-F]{32,}"

REFERENCE_PATTERN = re.compile(
    rf"^(?:(?P<registry>{_DOMAIN})/)?"
    rf"(?P<repository>{_PATH_COMPONENT}(?:/{_PATH_COMPONENT})*)"
    rf"(?::(?P<tag>{_TAG}))?"
    rf"(?:@(?P<digest>{_DIGEST}))?$",
    re.ASCII,
)

MAX_NAME_LENGTH = 255


@dataclass(frozen=True)
class ImageReference:
    raw: str
    registry: Optional[str]
    repository: str
    tag: Optional[str]
    digest: Optional[str]

    @property
    def name(self) -> str:
        return f"{self.registry}/{self.repository}" if self.registry else self.repository

    def __str__(self) -> str:
        return self.raw


def _looks_like_registry(component: str) -> bool:
    # A first path component is a registry only if it cannot be a repository name.
    return "." in component or ":" in component or component == "localhost" or component != component.lower()


def parse_image_reference(value: Optional[str]) -> ImageReference:
    """
    Parse and validate a container image reference.

    Args:
        value: Raw input string, e.g. ``alpine:latest`` or
            ``registry.example.com:5000/team/app@sha256:...``

    Returns:
        Parsed ImageReference; ``raw`` is the stripped input

    Raises:
        InvalidInputError: If the value is empty or not a valid reference
    """
    raw = (value or "").strip()
    if not raw:
        raise InvalidInputError("Input required and not supplied: image_reference")

    match = REFERENCE_PATTERN.match(raw)
    if match is None:
        raise InvalidInputError(f"Invalid image reference: {raw!r}")

    registry = match.group("registry")
    repository = match.group("repository")
    if registry and not _looks_like_registry(registry):
        # "library/alpine": the first component is part of the repository path.
        repository = f"{registry}/{repository}"
        registry = None

    name = f"{registry}/{repository}" if registry else repository
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidInputError(f"Image name exceeds {MAX_NAME_LENGTH} characters")

    return ImageReference(
        raw=raw,
        registry=registry,
        repository=repository,
        tag=match.group("tag"),
        digest=match.group("digest"),
    )


def ensure_directory(path_str: str) -> Path:
    path = Path(path_str).expanduser().resolve()
    if not path.is_dir():
        raise InvalidInputError(f"Working directory does not exist: {path}")
    return path
