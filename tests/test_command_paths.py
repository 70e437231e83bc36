# File: tests/test_command_paths.py
# Purpose: Executable resolution against the working directory and PATH.
import os

from scan_action.core.command_paths import is_executable, resolve_command


def test_relative_path_resolves_against_working_directory(tmp_path, make_script):
    script = make_script("scanner", "true")

    assert resolve_command("./scanner", tmp_path) == str(script)
    assert is_executable(str(script))


def test_missing_relative_path(tmp_path):
    assert resolve_command("./scanner", tmp_path) is None


def test_bare_name_uses_child_path(tmp_path, make_script):
    make_script("custom-scanner", "true")

    found = resolve_command("custom-scanner", tmp_path / "elsewhere", env={"PATH": str(tmp_path)})

    assert found == os.path.join(str(tmp_path), "custom-scanner")


def test_bare_name_not_on_path(tmp_path):
    assert resolve_command("definitely-not-a-real-scanner-xyz", tmp_path, env={"PATH": str(tmp_path)}) is None


def test_empty_name(tmp_path):
    assert resolve_command("", tmp_path) is None


def test_non_executable_file(tmp_path, make_script):
    script = make_script("scanner", "true", executable=False)

    assert not is_executable(str(script))
    assert not is_executable(str(tmp_path))
