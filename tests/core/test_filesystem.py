"""
Tests for filesystem utilities.
"""

import io
import os
import stat
import sys
import tarfile
import zipfile
from unittest import mock

import pytest

from getgo.core import filesystem
from getgo.core.exceptions import (
    ArchiveExtractionError,
    FilesystemError,
    InsecureArchiveError,
)
from getgo.core.filesystem import (
    extract_archive,
    is_relative_to,
    move_contents,
    safe_rmtree,
    temporary_directory,
)


def _tar_with(path, members):
    with tarfile.open(path, "w:gz") as tar:
        for name, content in members:
            info = tarfile.TarInfo(name)
            info.size = len(content)
            tar.addfile(info, io.BytesIO(content))


class TestExtractArchive:
    def test_extract_tar_gz(self, tmp_path):
        archive = tmp_path / "go.tar.gz"
        _tar_with(archive, [("go/bin/go", b"binary"), ("go/VERSION", b"go1.21.5")])

        extract_archive(archive, tmp_path / "out")

        assert (tmp_path / "out" / "go" / "bin" / "go").read_bytes() == b"binary"

    def test_extract_zip(self, tmp_path):
        archive = tmp_path / "go.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("go/bin/go.exe", b"binary")

        extract_archive(archive, tmp_path / "out")

        assert (tmp_path / "out" / "go" / "bin" / "go.exe").exists()

    def test_traversal_blocked(self, tmp_path):
        archive = tmp_path / "evil.tar.gz"
        _tar_with(archive, [("../escape.txt", b"x")])

        with pytest.raises(InsecureArchiveError):
            extract_archive(archive, tmp_path / "out")
        assert not (tmp_path / "escape.txt").exists()

    def test_zip_traversal_blocked(self, tmp_path):
        archive = tmp_path / "evil.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("../../escape.txt", b"x")

        with pytest.raises(InsecureArchiveError):
            extract_archive(archive, tmp_path / "out")

    def test_missing_archive(self, tmp_path):
        with pytest.raises(ArchiveExtractionError, match="not found"):
            extract_archive(tmp_path / "missing.tar.gz", tmp_path / "out")

    def test_unsupported_format(self, tmp_path):
        archive = tmp_path / "go.rar"
        archive.write_bytes(b"rar")
        with pytest.raises(ArchiveExtractionError, match="Unsupported"):
            extract_archive(archive, tmp_path / "out")

    def test_corrupt_archive(self, tmp_path):
        archive = tmp_path / "go.tar.gz"
        archive.write_bytes(b"not a tarball")
        with pytest.raises(ArchiveExtractionError):
            extract_archive(archive, tmp_path / "out")


class TestMoveContents:
    def test_moves_entries(self, tmp_path):
        src = tmp_path / "src"
        (src / "bin").mkdir(parents=True)
        (src / "bin" / "go").write_text("go")
        (src / "VERSION").write_text("v")

        move_contents(src, tmp_path / "dst")

        assert (tmp_path / "dst" / "bin" / "go").exists()
        assert (tmp_path / "dst" / "VERSION").exists()
        assert list(src.iterdir()) == []


class TestSafeRmtree:
    def test_removes_directory(self, tmp_path):
        target = tmp_path / "sdk" / "go1.20"
        (target / "bin").mkdir(parents=True)

        safe_rmtree(target, require_prefix=tmp_path / "sdk")

        assert not target.exists()

    def test_refuses_outside_prefix(self, tmp_path):
        target = tmp_path / "elsewhere"
        target.mkdir()

        with pytest.raises(ValueError, match="Refusing"):
            safe_rmtree(target, require_prefix=tmp_path / "sdk")
        assert target.exists()

    def test_missing_is_noop(self, tmp_path):
        safe_rmtree(tmp_path / "missing")

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_refuses_symlink(self, tmp_path):
        real = tmp_path / "real"
        real.mkdir()
        (real / "keep").write_text("x")
        link = tmp_path / "link"
        link.symlink_to(real, target_is_directory=True)

        with pytest.raises(FilesystemError):
            safe_rmtree(link)
        assert (real / "keep").exists()

    def test_windows_clears_readonly_with_current_hook(self, tmp_path, monkeypatch):
        target = tmp_path / "go1.20"
        target.mkdir()
        rmtree = mock.Mock()
        monkeypatch.setattr(filesystem, "os", mock.Mock(wraps=os, name="os"))
        filesystem.os.name = "nt"
        monkeypatch.setattr(filesystem.shutil, "rmtree", rmtree)

        safe_rmtree(target)

        hook = "onexc" if sys.version_info >= (3, 12) else "onerror"
        rmtree.assert_called_once_with(target, **{hook: filesystem._clear_readonly})

    def test_clear_readonly_retries_writable(self, tmp_path):
        locked = tmp_path / "go.mod"
        locked.write_text("module x")
        locked.chmod(stat.S_IREAD)
        modes = []

        filesystem._clear_readonly(lambda p: modes.append(os.stat(p).st_mode), str(locked), None)

        assert modes and modes[0] & stat.S_IWRITE


class TestIsRelativeTo:
    def test_relative(self, tmp_path):
        assert is_relative_to(tmp_path / "a" / "b", tmp_path)
        assert not is_relative_to(tmp_path, tmp_path / "a")


def test_temporary_directory_is_removed(tmp_path):
    with temporary_directory(parent=tmp_path / "staging") as temp:
        (temp / "file").write_text("x")
        assert temp.parent == tmp_path / "staging"
    assert not temp.exists()
