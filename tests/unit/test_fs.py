"""Tests for the filesystem primitives."""

import errno
import os

import pytest

from temptrack import fs


class TestRemovePathSync:
    def test_removes_file(self, tmp_path):
        target = tmp_path / "file.txt"
        target.write_text("x")
        fs.remove_path_sync(str(target))
        assert not target.exists()

    def test_removes_tree(self, tmp_path):
        root = tmp_path / "tree"
        (root / "a" / "b").mkdir(parents=True)
        (root / "a" / "b" / "leaf.txt").write_text("x")
        fs.remove_path_sync(str(root))
        assert not root.exists()

    def test_missing_path_is_fine(self, tmp_path):
        fs.remove_path_sync(str(tmp_path / "absent"))

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_symlink_removed_not_followed(self, tmp_path):
        real = tmp_path / "real"
        real.mkdir()
        (real / "keep.txt").write_text("x")
        link = tmp_path / "link"
        try:
            link.symlink_to(real, target_is_directory=True)
        except OSError:
            pytest.skip("cannot create symlinks here")

        fs.remove_path_sync(str(link))

        assert not os.path.lexists(link)
        assert (real / "keep.txt").exists()

    def test_busy_errors_are_retried(self, tmp_path, monkeypatch):
        attempts = []
        real_remove = fs._remove_once

        def busy_then_remove(path):
            attempts.append(path)
            if len(attempts) < 3:
                raise OSError(errno.EBUSY, "Device or resource busy", path)
            real_remove(path)

        monkeypatch.setattr(fs, "_remove_once", busy_then_remove)
        monkeypatch.setattr("temptrack.shared.retry.time.sleep", lambda seconds: None)
        target = tmp_path / "busy.txt"
        target.write_text("x")

        fs.remove_path_sync(str(target))

        assert len(attempts) == 3
        assert not target.exists()


class TestAsyncPrimitives:
    @pytest.mark.asyncio
    async def test_remove_path(self, tmp_path):
        root = tmp_path / "tree"
        (root / "sub").mkdir(parents=True)
        await fs.remove_path(str(root))
        assert not root.exists()

    @pytest.mark.asyncio
    async def test_remove_missing(self, tmp_path):
        await fs.remove_path(str(tmp_path / "absent"))

    @pytest.mark.asyncio
    async def test_make_dirs_and_open(self, tmp_path):
        created = await fs.make_dirs(str(tmp_path / "x" / "y"))
        assert os.path.isdir(created)

        fd = await fs.open_exclusive(os.path.join(created, "file"))
        os.close(fd)
        with pytest.raises(FileExistsError):
            await fs.open_exclusive(os.path.join(created, "file"))
