import logging
import string
import sys

import pytest

from mcdevkit.exceptions import PathValidationError
from mcdevkit.models import Software, WorkingDirectory
from mcdevkit.utils.system import JavaManager, PathManager


def test_random_suffix_is_alphanumeric():
    suffix = PathManager.generate_random_suffix()
    assert len(suffix) == 8
    assert set(suffix) <= set(string.ascii_letters + string.digits)


def test_configured_temp_root_is_used(temp_root):
    assert PathManager.get_temp_folder() == temp_root


def test_temp_workspaces_share_parent_and_never_collide(temp_root):
    first = PathManager.resolve_working_directory(WorkingDirectory.generate(), Software.PAPER, "1.20.1")
    second = PathManager.resolve_working_directory(WorkingDirectory.generate(), Software.PAPER, "1.20.1")

    assert first != second
    assert first.parent == second.parent == temp_root / "mcdevkit"
    assert first.is_dir() and second.is_dir()
    assert first.name.startswith("paper-1.20.1-")


def test_explicit_missing_directory_is_created(tmp_path):
    target = tmp_path / "server"

    resolved = PathManager.resolve_working_directory(
        WorkingDirectory.explicit(target), Software.PAPER, "1.20.1"
    )

    assert resolved == target.resolve()
    assert resolved.is_absolute()
    assert resolved.is_dir()


def test_explicit_relative_directory_is_made_absolute(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    resolved = PathManager.resolve_working_directory(
        WorkingDirectory.explicit("none"), Software.PAPER, "1.20.1"
    )
    assert resolved == (tmp_path / "none").resolve()


def test_explicit_directory_that_cannot_be_created_fails(tmp_path, caplog):
    caplog.set_level(logging.ERROR)
    target = tmp_path / "missing-parent" / "server"

    with pytest.raises(PathValidationError):
        PathManager.resolve_working_directory(WorkingDirectory.explicit(target), Software.PAPER, "1.20.1")

    assert "Error creating directory" in caplog.text


def test_explicit_file_is_rejected(tmp_path):
    target = tmp_path / "server.txt"
    target.write_text("not a directory")

    with pytest.raises(PathValidationError, match="not a file"):
        PathManager.resolve_working_directory(WorkingDirectory.explicit(target), Software.PAPER, "1.20.1")


def test_create_dir_if_absent_is_idempotent(tmp_path):
    target = tmp_path / "plugins"
    assert PathManager.create_dir_if_absent(target) == target
    assert PathManager.create_dir_if_absent(target) == target
    assert target.is_dir()


def test_copy_plugins_skips_missing_and_non_files(tmp_path, caplog):
    caplog.set_level(logging.INFO, logger="mcdevkit.utils.system")
    valid = tmp_path / "validFile.jar"
    valid.write_bytes(b"plugin")
    missing = tmp_path / "missing.jar"
    a_directory = tmp_path / "aDirectory"
    a_directory.mkdir()
    plugins_folder = tmp_path / "plugins"
    plugins_folder.mkdir()

    copied = PathManager.copy_plugins([valid, missing, a_directory], plugins_folder)

    assert copied == [plugins_folder / "validFile.jar"]
    assert [p.name for p in plugins_folder.iterdir()] == ["validFile.jar"]
    assert (plugins_folder / "validFile.jar").read_bytes() == b"plugin"
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 2


def test_copy_plugins_into_missing_folder_copies_nothing(tmp_path, caplog):
    caplog.set_level(logging.ERROR)
    plugin = tmp_path / "plugin.jar"
    plugin.write_bytes(b"plugin")

    assert PathManager.copy_plugins([plugin], tmp_path / "plugins") == []
    assert "does not exist" in caplog.text


def test_java_executable_accepts_explicit_path():
    assert JavaManager.get_java_executable(sys.executable) is not None


def test_java_executable_missing_returns_none():
    assert JavaManager.get_java_executable("definitely-not-a-java-binary") is None
