# File: tests/test_validators.py
# Purpose: Image reference parsing and rejection of malformed input.
import pytest

from scan_action.core.errors import InvalidInputError
from scan_action.core.validators import ensure_directory, parse_image_reference

DIGEST = "sha256:" + "a" * 64


@pytest.mark.parametrize(
    "raw, registry, repository, tag, digest",
    [
        ("alpine", None, "alpine", None, None),
        ("alpine:latest", None, "alpine", "latest", None),
        ("library/alpine:3.19", None, "library/alpine", "3.19", None),
        ("docker.io/library/alpine:3.19", "docker.io", "library/alpine", "3.19", None),
        ("localhost:5000/team/app:v1.2.3", "localhost:5000", "team/app", "v1.2.3", None),
        ("ghcr.io/org/my-app@" + DIGEST, "ghcr.io", "org/my-app", None, DIGEST),
        ("quay.io/org/app:1.0@" + DIGEST, "quay.io", "org/app", "1.0", DIGEST),
        ("my_repo__name/app", None, "my_repo__name/app", None, None),
    ],
)
def test_valid_references(raw, registry, repository, tag, digest):
    ref = parse_image_reference(raw)

    assert ref.raw == raw
    assert ref.registry == registry
    assert ref.repository == repository
    assert ref.tag == tag
    assert ref.digest == digest


def test_surrounding_whitespace_is_stripped():
    ref = parse_image_reference("  alpine:latest\n")

    assert ref.raw == "alpine:latest"
    assert str(ref) == "alpine:latest"
    assert ref.name == "alpine"


@pytest.mark.parametrize("raw", ["", "   ", None])
def test_empty_reference_is_rejected(raw):
    with pytest.raises(InvalidInputError, match="image_reference"):
        parse_image_reference(raw)


@pytest.mark.parametrize(
    "raw",
    [
        "; rm -rf /",
        "$(whoami)",
        "`id`",
        "alpine latest",
        "-rf",
        "--config=/etc/passwd",
        "Alpine",
        "alpine:",
        "alpine@sha256:short",
        "alpine:" + "t" * 200,
        "/alpine",
        "alpine/",
        "a" * 256,
    ],
)
def test_malformed_reference_is_rejected(raw):
    with pytest.raises(InvalidInputError):
        parse_image_reference(raw)


def test_ensure_directory(tmp_path):
    assert ensure_directory(str(tmp_path)) == tmp_path.resolve()
    with pytest.raises(InvalidInputError):
        ensure_directory(str(tmp_path / "missing"))
