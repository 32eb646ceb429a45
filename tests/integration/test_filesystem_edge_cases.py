"""Integration tests for filesystem edge cases."""

from __future__ import annotations

import errno
import os
import stat
from pathlib import Path

import pytest

from testdir import Directory, EmptyFile, IoFailure, RandomFile, TestRoot, ZeroFilledFile
from tests.helpers import tree_listing


def _running_as_root() -> bool:
    return hasattr(os, "geteuid") and os.geteuid() == 0


@pytest.mark.skipif(os.name == "nt" or _running_as_root(), reason="needs POSIX permission checks")
def test_permission_denied_surfaces_io_failure(temp_root: TestRoot) -> None:
    temp_root.create("locked", Directory())
    locked = temp_root.path("locked")
    locked.chmod(stat.S_IRUSR | stat.S_IXUSR)
    try:
        with pytest.raises(IoFailure) as excinfo:
            temp_root.create("locked/file", EmptyFile())
        assert excinfo.value.errno == errno.EACCES
        assert excinfo.value.path == locked / "file"
    finally:
        locked.chmod(stat.S_IRWXU)


@pytest.mark.skipif(os.name == "nt" or _running_as_root(), reason="needs POSIX permission checks")
def test_partial_tree_is_kept_after_failure(temp_root: TestRoot) -> None:
    temp_root.create("ok/file", EmptyFile()).create("locked", Directory())
    temp_root.path("locked").chmod(stat.S_IRUSR | stat.S_IXUSR)
    try:
        with pytest.raises(IoFailure):
            temp_root.create("locked/deeper/file", EmptyFile())
        assert temp_root.path("ok/file").is_file()
    finally:
        temp_root.path("locked").chmod(stat.S_IRWXU)


def _deny_writes_under(locked: Path):
    """Build an ``open`` replacement that refuses paths below ``locked``."""
    real_open = open

    def _open(file, *args, **kwargs):
        if locked in Path(file).parents:
            raise PermissionError(errno.EACCES, "Permission denied", str(file))
        return real_open(file, *args, **kwargs)

    return _open


def test_denied_write_surfaces_io_failure(temp_root: TestRoot, monkeypatch: pytest.MonkeyPatch) -> None:
    temp_root.create("locked", Directory())
    locked = temp_root.path("locked")
    monkeypatch.setattr("testdir.builder.open", _deny_writes_under(locked), raising=False)

    with pytest.raises(IoFailure) as excinfo:
        temp_root.create("locked/file", ZeroFilledFile(16))

    assert excinfo.value.errno == errno.EACCES
    assert excinfo.value.path == locked / "file"
    assert excinfo.value.operation == "write ZeroFilledFile"
    assert isinstance(excinfo.value.cause, PermissionError)


def test_denied_write_keeps_earlier_entries(temp_root: TestRoot, monkeypatch: pytest.MonkeyPatch) -> None:
    temp_root.create("ok/file", EmptyFile()).create("locked", Directory())
    monkeypatch.setattr("testdir.builder.open", _deny_writes_under(temp_root.path("locked")), raising=False)

    with pytest.raises(IoFailure):
        temp_root.create_all([
            ("ok/second", EmptyFile()),
            ("locked/file", EmptyFile()),
            ("never", EmptyFile()),
        ])

    assert temp_root.path("ok/file").is_file()
    assert temp_root.path("ok/second").is_file()
    assert not temp_root.path("never").exists()
    assert temp_root.files == (temp_root.path("ok/file"), temp_root.path("ok/second"))


def test_remove_symlink_keeps_target(temp_root: TestRoot, tmp_path: Path) -> None:
    if not hasattr(os, "symlink"):
        pytest.skip("symlinks not supported")
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "precious").write_text("keep")
    link = temp_root.path("link")
    try:
        os.symlink(outside, link, target_is_directory=True)
    except OSError:
        pytest.skip("symlink creation not permitted")

    temp_root.remove("link")

    assert not os.path.lexists(link)
    assert (outside / "precious").read_text() == "keep"


def test_release_does_not_follow_symlinks_out_of_root(system_temp: Path, tmp_path: Path) -> None:
    if not hasattr(os, "symlink"):
        pytest.skip("symlinks not supported")
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "precious").write_text("keep")
    root = TestRoot.new_temporary()
    try:
        os.symlink(outside, root.path("link"), target_is_directory=True)
    except OSError:
        root.release()
        pytest.skip("symlink creation not permitted")

    root.release()

    assert not root.root_path.exists()
    assert (outside / "precious").read_text() == "keep"


def test_unicode_and_space_names(temp_root: TestRoot) -> None:
    temp_root.create("mötley crüe/01 - Kickstart.bin", RandomFile(64))

    assert tree_listing(temp_root.root_path) == ["mötley crüe/", "mötley crüe/01 - Kickstart.bin"]


def test_caller_owned_root_keeps_foreign_content(tmp_path: Path) -> None:
    (tmp_path / "foreign").write_text("theirs")

    root = TestRoot.new_at(tmp_path).create("mine", EmptyFile())
    root.release()

    assert tree_listing(tmp_path) == ["foreign", "mine"]
