"""Creation of tracked temporary directories, files and write streams."""

from __future__ import annotations

import asyncio
import logging
from typing import BinaryIO, NamedTuple, Optional

from .adapter import NodeCallback, run_with_callback
from .constants import DIR_MODE, DIR_PREFIX, FILE_MODE, FILE_PREFIX, RDWR_EXCL, STREAM_PREFIX
from .fs import (
    make_dirs,
    make_dirs_sync,
    open_exclusive,
    open_exclusive_sync,
    open_write_stream_sync,
)
from .naming import AffixesLike, generate_name
from .registry import TempRegistry, get_registry

logger = logging.getLogger(__name__)


class OpenFile(NamedTuple):
    """A freshly created temporary file and its open descriptor.

    The descriptor belongs to the caller; cleanup only removes the path.
    """

    path: str
    fd: int


def _resolve(registry: Optional[TempRegistry]) -> TempRegistry:
    return registry if registry is not None else get_registry()


def mkdir(
    affixes: AffixesLike = None,
    callback: Optional[NodeCallback] = None,
    *,
    registry: Optional[TempRegistry] = None,
) -> Optional[asyncio.Future]:
    """Create a temporary directory (mode 0700).

    Without a callback, returns a future resolving to the new path; with one,
    calls ``callback(error, path)``. Malformed affixes raise immediately.
    """
    registry = _resolve(registry)
    dir_path = generate_name(affixes, DIR_PREFIX)

    async def create() -> str:
        await make_dirs(dir_path, DIR_MODE)
        return registry.register_dir(dir_path)

    return run_with_callback(create, callback)


def mkdir_sync(affixes: AffixesLike = None, *, registry: Optional[TempRegistry] = None) -> str:
    """Create a temporary directory (mode 0700) and return its path."""
    registry = _resolve(registry)
    dir_path = generate_name(affixes, DIR_PREFIX)
    make_dirs_sync(dir_path, DIR_MODE)
    return registry.register_dir(dir_path)


def open(
    affixes: AffixesLike = None,
    callback: Optional[NodeCallback] = None,
    *,
    registry: Optional[TempRegistry] = None,
) -> Optional[asyncio.Future]:
    """Create and open a temporary file for reading and writing.

    The file is created exclusively with mode 0600. Resolves to an
    :class:`OpenFile`, or calls ``callback(error, open_file)``.
    """
    registry = _resolve(registry)
    file_path = generate_name(affixes, FILE_PREFIX)

    async def create() -> OpenFile:
        fd = await open_exclusive(file_path, RDWR_EXCL, FILE_MODE)
        registry.register_file(file_path)
        return OpenFile(file_path, fd)

    return run_with_callback(create, callback)


def open_sync(affixes: AffixesLike = None, *, registry: Optional[TempRegistry] = None) -> OpenFile:
    """Create and open a temporary file, returning an :class:`OpenFile`."""
    registry = _resolve(registry)
    file_path = generate_name(affixes, FILE_PREFIX)
    fd = open_exclusive_sync(file_path, RDWR_EXCL, FILE_MODE)
    registry.register_file(file_path)
    return OpenFile(file_path, fd)


def create_write_stream(affixes: AffixesLike = None, *, registry: Optional[TempRegistry] = None) -> BinaryIO:
    """Create a temporary file and return a binary stream writing to it.

    The file is created exclusively with mode 0600 and the stream's ``name``
    is the generated path. Closing the stream is up to the caller; the file
    itself is removed by cleanup.
    """
    registry = _resolve(registry)
    file_path = generate_name(affixes, STREAM_PREFIX)
    stream = open_write_stream_sync(file_path, FILE_MODE)
    registry.register_file(file_path)
    logger.debug("Opened write stream on %s", file_path)
    return stream
