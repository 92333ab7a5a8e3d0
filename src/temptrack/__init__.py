"""Tracked temporary files, directories and write streams.

Everything created through this package is recorded and removed when the
interpreter exits, unless tracking was turned off with
``enable_tracking(False)``. Cleanup can also be run explicitly, either
synchronously (:func:`cleanup_sync`) or from an event loop
(:func:`cleanup`), which accepts an optional ``callback(error, result)`` and
otherwise returns an awaitable.
"""

from .cleaner import (
    CleanupStats,
    cleanup,
    cleanup_dirs,
    cleanup_dirs_sync,
    cleanup_files,
    cleanup_files_sync,
    cleanup_sync,
)
from .errors import NotTrackingError, TempTrackError
from .factories import OpenFile, create_write_stream, mkdir, mkdir_sync, open, open_sync
from .logging_config import configure_logging
from .naming import Affixes, generate_name, get_base_dir, set_base_dir
from .registry import TempRegistry, get_registry
from .shared.validators import ValidationError

__version__ = "0.1.0"

path = generate_name


def enable_tracking(flag: bool = True) -> TempRegistry:
    """Turn automatic cleanup of new resources on (default) or off."""
    return get_registry().enable_tracking(flag)


track = enable_tracking

__all__ = [
    "Affixes",
    "CleanupStats",
    "NotTrackingError",
    "OpenFile",
    "TempRegistry",
    "TempTrackError",
    "ValidationError",
    "cleanup",
    "cleanup_dirs",
    "cleanup_dirs_sync",
    "cleanup_files",
    "cleanup_files_sync",
    "cleanup_sync",
    "configure_logging",
    "create_write_stream",
    "enable_tracking",
    "generate_name",
    "get_base_dir",
    "get_registry",
    "mkdir",
    "mkdir_sync",
    "open",
    "open_sync",
    "path",
    "set_base_dir",
    "track",
]
