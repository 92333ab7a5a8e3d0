"""Tests for the temp resource factories."""

import asyncio
import builtins
import os
import re
import stat
import sys

import pytest

from temptrack import factories
from temptrack.factories import OpenFile, create_write_stream, mkdir, mkdir_sync, open, open_sync
from temptrack.shared import ValidationError

posix_only = pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX permission bits")


class TestOpenSync:
    def test_affixed_empty_writable_file(self, registry):
        handle = open_sync({"prefix": "a-", "suffix": ".tmp"}, registry=registry)
        try:
            assert isinstance(handle, OpenFile)
            assert re.fullmatch(r"a-\d+-\d+-[0-9a-z]+\.tmp", os.path.basename(handle.path))
            assert os.path.isfile(handle.path)
            assert os.path.getsize(handle.path) == 0
            assert os.write(handle.fd, b"hello") == 5
        finally:
            os.close(handle.fd)
        assert registry.pending_files() == [handle.path]

    @posix_only
    def test_private_permissions(self, registry):
        path, fd = open_sync(registry=registry)
        os.close(fd)
        assert stat.S_IMODE(os.stat(path).st_mode) & 0o077 == 0

    def test_default_prefix(self, registry):
        path, fd = open_sync(registry=registry)
        os.close(fd)
        assert os.path.basename(path).startswith("f-")

    def test_existing_path_fails_and_is_not_registered(self, registry, tmp_path, monkeypatch):
        taken = tmp_path / "taken"
        taken.write_text("someone else's")
        monkeypatch.setattr(factories, "generate_name", lambda affixes, prefix: str(taken))

        with pytest.raises(FileExistsError):
            open_sync(registry=registry)
        assert registry.pending_files() == []
        assert taken.read_text() == "someone else's"

    def test_not_tracked_when_disabled(self, registry):
        registry.enable_tracking(False)
        path, fd = open_sync(registry=registry)
        os.close(fd)
        assert os.path.exists(path)
        assert registry.pending_files() == []


class TestMkdirSync:
    def test_creates_and_registers(self, registry):
        path = mkdir_sync("build-", registry=registry)
        assert os.path.isdir(path)
        assert os.path.basename(path).startswith("build-")
        assert registry.pending_dirs() == [path]

    def test_creates_missing_parents(self, registry, tmp_path):
        path = mkdir_sync({"dir": str(tmp_path / "a" / "b")}, registry=registry)
        assert os.path.isdir(path)

    @posix_only
    def test_private_permissions(self, registry):
        path = mkdir_sync(registry=registry)
        assert stat.S_IMODE(os.stat(path).st_mode) & 0o077 == 0

    def test_existing_dir_fails(self, registry, tmp_path, monkeypatch):
        monkeypatch.setattr(factories, "generate_name", lambda affixes, prefix: str(tmp_path))
        with pytest.raises(FileExistsError):
            mkdir_sync(registry=registry)
        assert registry.pending_dirs() == []


class TestWriteStream:
    def test_stream_writes_to_tracked_file(self, registry):
        stream = create_write_stream({"suffix": ".log"}, registry=registry)
        with stream:
            stream.write(b"line\n")
        assert stream.name.endswith(".log")
        assert re.fullmatch(r"\d{8}-\d+-[0-9a-z]+\.log", os.path.basename(stream.name))
        with builtins.open(stream.name, "rb") as handle:
            assert handle.read() == b"line\n"
        assert registry.pending_files() == [stream.name]

    def test_default_prefix(self, registry):
        with create_write_stream(registry=registry) as stream:
            assert os.path.basename(stream.name).startswith("s-")

    def test_existing_path_fails(self, registry, tmp_path, monkeypatch):
        taken = tmp_path / "taken.log"
        taken.write_bytes(b"keep")
        monkeypatch.setattr(factories, "generate_name", lambda affixes, prefix: str(taken))
        with pytest.raises(FileExistsError):
            create_write_stream(registry=registry)
        assert taken.read_bytes() == b"keep"
        assert registry.pending_files() == []


class TestAsyncFactories:
    @pytest.mark.asyncio
    async def test_mkdir_awaitable(self, registry):
        path = await mkdir({"prefix": "job-"}, registry=registry)
        assert os.path.isdir(path)
        assert registry.pending_dirs() == [path]

    @pytest.mark.asyncio
    async def test_mkdir_callback(self, registry):
        received = asyncio.get_running_loop().create_future()
        assert mkdir(None, lambda *args: received.set_result(args), registry=registry) is None
        error, path = await received
        assert error is None
        assert os.path.isdir(path)

    @pytest.mark.asyncio
    async def test_open_awaitable(self, registry):
        handle = await open(registry=registry)
        os.close(handle.fd)
        assert os.path.isfile(handle.path)
        assert registry.pending_files() == [handle.path]

    @pytest.mark.asyncio
    async def test_open_failure_reports_error(self, registry, tmp_path, monkeypatch):
        taken = tmp_path / "taken"
        taken.write_text("x")
        monkeypatch.setattr(factories, "generate_name", lambda affixes, prefix: str(taken))
        received = asyncio.get_running_loop().create_future()

        open(None, lambda *args: received.set_result(args), registry=registry)
        (error,) = await received

        assert isinstance(error, FileExistsError)
        assert registry.pending_files() == []

    @pytest.mark.asyncio
    async def test_bad_affixes_raise_immediately(self, registry):
        with pytest.raises(ValidationError):
            mkdir(42, registry=registry)
        with pytest.raises(ValidationError):
            open({"unknown": True}, registry=registry)

    @pytest.mark.asyncio
    async def test_bad_callback_raises_immediately(self, registry):
        with pytest.raises(ValidationError):
            mkdir(None, "callback", registry=registry)
        assert registry.pending_dirs() == []
