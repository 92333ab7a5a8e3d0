"""Filesystem primitives used by the factories and the cleanup engine.

Removal, directory creation and exclusive open each have a coroutine twin
that runs the blocking call on the event loop's default executor; results
are delivered back on the loop thread.
"""

from __future__ import annotations

import asyncio
import builtins
import logging
import os
import shutil
import stat
from functools import partial
from typing import BinaryIO

from .constants import DEFAULT_MAX_BUSY_TRIES, DIR_MODE, FILE_MODE, RDWR_EXCL
from .shared.retry import async_retry_on_busy, retry_on_busy

logger = logging.getLogger(__name__)


def _remove_once(path: str) -> None:
    try:
        st = os.lstat(path)
    except FileNotFoundError:
        return

    try:
        if stat.S_ISDIR(st.st_mode):
            shutil.rmtree(path)
        else:
            os.unlink(path)
    except FileNotFoundError:
        # Removed underneath us; absent is the goal
        return
    logger.debug("Removed %s", path)


@retry_on_busy(max_attempts=DEFAULT_MAX_BUSY_TRIES)
def remove_path_sync(path: str) -> None:
    """Remove ``path`` and everything under it, tolerating absence.

    Busy errors are retried; pass ``max_busy_tries=`` to change the limit.
    """
    _remove_once(path)


@async_retry_on_busy(max_attempts=DEFAULT_MAX_BUSY_TRIES)
async def remove_path(path: str) -> None:
    """Coroutine form of :func:`remove_path_sync`."""
    loop = asyncio.get_running_loop()
    await loop.run_in_executor(None, _remove_once, path)


def make_dirs_sync(path: str, mode: int = DIR_MODE) -> str:
    os.makedirs(path, mode)
    return path


async def make_dirs(path: str, mode: int = DIR_MODE) -> str:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, make_dirs_sync, path, mode)


def open_exclusive_sync(path: str, flags: int = RDWR_EXCL, mode: int = FILE_MODE) -> int:
    """Open ``path`` for read-write, failing if it already exists."""
    return os.open(path, flags, mode)


async def open_exclusive(path: str, flags: int = RDWR_EXCL, mode: int = FILE_MODE) -> int:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(open_exclusive_sync, path, flags, mode))


def open_write_stream_sync(path: str, mode: int = FILE_MODE) -> BinaryIO:
    """Create ``path`` exclusively and return a binary writer on it."""
    return builtins.open(path, "xb", opener=lambda target, flags: os.open(target, flags, mode))
