"""Removal of registered temporary resources.

Synchronous passes pop entries one at a time in registration order.
Asynchronous passes drain the registry in one step, then dispatch every
removal at once; the first failure completes the pass and later results are
dropped. Removals already dispatched are never cancelled.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from .adapter import NodeCallback, run_with_callback
from .errors import NotTrackingError
from .fs import remove_path, remove_path_sync
from .registry import TempRegistry, get_registry

logger = logging.getLogger(__name__)


@dataclass
class CleanupStats:
    """Entries processed by a cleanup pass, per kind."""

    files: Optional[int] = 0
    dirs: Optional[int] = 0


def _resolve(registry: Optional[TempRegistry]) -> TempRegistry:
    return registry if registry is not None else get_registry()


def _drain_sync(registry: TempRegistry, pop: Callable[[], Optional[str]]) -> int:
    count = 0
    while True:
        path = pop()
        if path is None:
            return count
        remove_path_sync(path, max_busy_tries=registry.max_busy_tries)
        count += 1


def cleanup_files_sync(registry: Optional[TempRegistry] = None) -> Union[int, bool]:
    """Remove every pending file now.

    Returns:
        Number of entries processed, or False when tracking is disabled
    """
    registry = _resolve(registry)
    if not registry.tracking:
        return False
    return _drain_sync(registry, registry.pop_file)


def cleanup_dirs_sync(registry: Optional[TempRegistry] = None) -> Union[int, bool]:
    """Remove every pending directory now.

    Returns:
        Number of entries processed, or False when tracking is disabled
    """
    registry = _resolve(registry)
    if not registry.tracking:
        return False
    return _drain_sync(registry, registry.pop_dir)


def cleanup_sync(registry: Optional[TempRegistry] = None) -> Union[CleanupStats, bool]:
    """Remove all pending files, then all pending directories.

    Returns:
        CleanupStats with both counts, or False when tracking is disabled
    """
    registry = _resolve(registry)
    if not registry.tracking:
        return False
    stats = CleanupStats(
        files=cleanup_files_sync(registry),
        dirs=cleanup_dirs_sync(registry),
    )
    logger.debug("Cleaned up %s file(s) and %s dir(s)", stats.files, stats.dirs)
    return stats


def _discard_result(task: asyncio.Future) -> None:
    # Results that arrive after the pass has completed are dropped
    if not task.cancelled():
        task.exception()


async def _drain(
    registry: TempRegistry,
    entries: list[str],
    kind: str,
    collect_all: bool = False,
) -> int:
    if not entries:
        return 0

    loop = asyncio.get_running_loop()
    removals = []
    for path in entries:
        removal = loop.create_task(remove_path(path, max_busy_tries=registry.max_busy_tries))
        removal.add_done_callback(_discard_result)
        removals.append(removal)

    count = 0
    errors: list[Exception] = []
    for finished in asyncio.as_completed(removals):
        try:
            await finished
        except Exception as e:
            if not collect_all:
                logger.debug("Aborting %s cleanup after %d removal(s): %s", kind, count, e)
                e.count = count
                e.errors = [e]
                raise
            errors.append(e)
        else:
            count += 1

    if errors:
        first = errors[0]
        first.count = count
        first.errors = errors
        raise first
    return count


async def _fail(error: BaseException):
    raise error


def _partial_count(error: BaseException) -> Optional[int]:
    return getattr(error, "count", None)


def _partial_stats(error: BaseException) -> Optional[CleanupStats]:
    return getattr(error, "stats", None)


def cleanup_files(
    callback: Optional[NodeCallback] = None,
    *,
    registry: Optional[TempRegistry] = None,
    collect_all: bool = False,
) -> Optional[asyncio.Future]:
    """Remove every pending file concurrently.

    Without a callback, returns a future resolving to the number of files
    removed. With one, calls ``callback(error, count)`` when done. Fails with
    NotTrackingError while tracking is disabled. A failed removal fails the
    pass with its own error, unwrapped, carrying the partial ``count`` and
    the ``errors`` seen (every failure when ``collect_all`` is set).
    """
    registry = _resolve(registry)

    def start():
        if not registry.tracking:
            return _fail(NotTrackingError())
        return _drain(registry, registry.take_files(), "files", collect_all)

    return run_with_callback(start, callback, partial_result=_partial_count)


def cleanup_dirs(
    callback: Optional[NodeCallback] = None,
    *,
    registry: Optional[TempRegistry] = None,
    collect_all: bool = False,
) -> Optional[asyncio.Future]:
    """Remove every pending directory concurrently. See :func:`cleanup_files`."""
    registry = _resolve(registry)

    def start():
        if not registry.tracking:
            return _fail(NotTrackingError())
        return _drain(registry, registry.take_dirs(), "dirs", collect_all)

    return run_with_callback(start, callback, partial_result=_partial_count)


async def _cleanup_all(registry: TempRegistry, files: list[str], collect_all: bool) -> CleanupStats:
    try:
        file_count = await _drain(registry, files, "files", collect_all)
    except Exception as e:
        e.stats = CleanupStats(files=e.count, dirs=None)
        raise

    try:
        dir_count = await _drain(registry, registry.take_dirs(), "dirs", collect_all)
    except Exception as e:
        e.stats = CleanupStats(files=file_count, dirs=e.count)
        raise

    logger.debug("Cleaned up %s file(s) and %s dir(s)", file_count, dir_count)
    return CleanupStats(files=file_count, dirs=dir_count)


def cleanup(
    callback: Optional[NodeCallback] = None,
    *,
    registry: Optional[TempRegistry] = None,
    collect_all: bool = False,
) -> Optional[asyncio.Future]:
    """Remove all pending files, then all pending directories.

    Directories are only drained once every file removal has succeeded, so a
    file failure leaves them registered. The result is a CleanupStats; on
    failure the removal error gets a ``stats`` attribute holding the counts
    known so far, which is also passed to the callback next to the error.
    """
    registry = _resolve(registry)

    def start():
        if not registry.tracking:
            return _fail(NotTrackingError())
        return _cleanup_all(registry, registry.take_files(), collect_all)

    return run_with_callback(start, callback, partial_result=_partial_stats)
