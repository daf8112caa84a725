from __future__ import annotations

import errno
import logging
import os
import stat
from pathlib import Path

import pytest

from scratchfs.base import fs
from scratchfs.base.fs import make_directory, remove_directory


def _build_tree(root: Path) -> None:
    (root / "b" / "c").mkdir(parents=True)
    (root / "top.txt").write_bytes(b"top")
    (root / "b" / "middle.txt").write_bytes(b"middle")
    (root / "b" / "c" / "leaf.bin").write_bytes(b"\x00" * 64)
    (root / "empty").mkdir()


def test_remove_directory_deletes_whole_tree(tmp_path: Path) -> None:
    root = tmp_path / "tree"
    _build_tree(root)

    remove_directory(root)

    assert not root.exists()
    assert tmp_path.exists()


def test_remove_directory_accepts_str_path(tmp_path: Path) -> None:
    root = tmp_path / "tree"
    _build_tree(root)

    remove_directory(str(root))

    assert not root.exists()


def test_remove_directory_on_symlink_keeps_target(tmp_path: Path) -> None:
    target = tmp_path / "target"
    _build_tree(target)
    link = tmp_path / "link"
    link.symlink_to(target, target_is_directory=True)

    remove_directory(link)

    assert not os.path.lexists(link)
    assert (target / "b" / "c" / "leaf.bin").read_bytes() == b"\x00" * 64


def test_remove_directory_does_not_follow_nested_symlinks(tmp_path: Path) -> None:
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "keep.txt").write_text("keep", encoding="utf-8")

    root = tmp_path / "tree"
    _build_tree(root)
    (root / "b" / "escape").symlink_to(outside, target_is_directory=True)
    (root / "dangling").symlink_to(tmp_path / "nowhere")

    remove_directory(root)

    assert not root.exists()
    assert (outside / "keep.txt").read_text(encoding="utf-8") == "keep"


def test_remove_directory_missing_path_is_noop(tmp_path: Path) -> None:
    remove_directory(tmp_path / "missing")
    assert list(tmp_path.iterdir()) == []


def test_remove_directory_removes_plain_file(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("x", encoding="utf-8")

    remove_directory(target)

    assert not target.exists()


def test_remove_directory_continues_after_failure(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    root = tmp_path / "tree"
    _build_tree(root)
    stuck = root / "b" / "stuck.txt"
    stuck.write_text("stuck", encoding="utf-8")

    real_unlink = os.unlink

    def _unlink(path, *args, **kwargs):
        if os.path.basename(path) == "stuck.txt":
            raise PermissionError(errno.EACCES, "Permission denied", path)
        return real_unlink(path, *args, **kwargs)

    monkeypatch.setattr(fs.os, "unlink", _unlink)
    caplog.set_level(logging.WARNING, logger="scratchfs")

    remove_directory(root)

    assert stuck.exists()
    assert not (root / "top.txt").exists()
    assert not (root / "b" / "middle.txt").exists()
    assert not (root / "b" / "c").exists()
    assert not (root / "empty").exists()
    messages = [record.getMessage() for record in caplog.records]
    assert any("stuck.txt" in message and str(errno.EACCES) in message for message in messages)


def test_make_directory_creates_nested_path_then_remove(tmp_path: Path) -> None:
    root = tmp_path / "X"
    nested = root / "b" / "b" / "b"

    assert make_directory(nested) is True
    assert nested.is_dir()
    assert (root / "b").is_dir()
    assert (root / "b" / "b").is_dir()

    remove_directory(root)
    assert not root.exists()


def test_make_directory_is_idempotent(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b"

    assert make_directory(target) is True
    assert make_directory(target) is True
    assert target.is_dir()
    assert [p.name for p in (tmp_path / "a").iterdir()] == ["b"]


def test_make_directory_existing_directory(tmp_path: Path) -> None:
    assert make_directory(tmp_path) is True
    assert make_directory(str(tmp_path) + os.sep) is True


def test_make_directory_ancestor_is_file(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a dir", encoding="utf-8")

    assert make_directory(blocker / "a" / "b") is False
    assert blocker.is_file()


def test_make_directory_path_is_file(tmp_path: Path) -> None:
    target = tmp_path / "file"
    target.write_text("x", encoding="utf-8")

    assert make_directory(target) is False


def test_make_directory_applies_mode(tmp_path: Path) -> None:
    target = tmp_path / "private" / "inner"

    assert make_directory(target, mode=0o700) is True
    assert stat.S_IMODE(target.stat().st_mode) == 0o700
    assert stat.S_IMODE((tmp_path / "private").stat().st_mode) == 0o700


def test_make_directory_tolerates_concurrent_creation(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    target = tmp_path / "raced"
    real_mkdir = os.mkdir

    def _mkdir(path, mode=0o777, *args, **kwargs):
        # Simulate another process creating the directory first.
        real_mkdir(path, mode)
        raise FileExistsError(errno.EEXIST, "File exists", path)

    monkeypatch.setattr(fs.os, "mkdir", _mkdir)

    assert make_directory(target) is True
    assert target.is_dir()
