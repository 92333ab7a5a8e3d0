"""Process-wide record of temporary resources awaiting removal."""

from __future__ import annotations

import atexit
import logging
import signal
import threading
from collections import deque
from typing import Optional

from .config import Settings, load_settings

logger = logging.getLogger(__name__)


def _exit_on_signal(signum, frame) -> None:
    # Turn termination into a normal interpreter exit so atexit handlers run
    raise SystemExit(128 + signum)


class TempRegistry:
    """Registry to track temporary files and directories for cleanup.

    Paths are kept in creation order and leave the registry only when a
    cleanup pass drains them. While tracking is disabled nothing is recorded.
    The first recorded path installs a single ``atexit`` handler that removes
    whatever is still pending when the interpreter exits.
    """

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or load_settings()
        self.tracking = settings.track
        self.max_busy_tries = settings.max_busy_tries
        self.handle_signals = settings.handle_signals
        self.exit_hook_installed = False
        self._files: deque[str] = deque()
        self._dirs: deque[str] = deque()

    def enable_tracking(self, flag: bool = True) -> "TempRegistry":
        """Turn tracking on or off. Already recorded paths are kept."""
        self.tracking = bool(flag)
        logger.debug("Tracking %s", "enabled" if self.tracking else "disabled")
        return self

    def register_file(self, filepath: str) -> str:
        """Register a temporary file for cleanup.

        Args:
            filepath: Path of a file that was just created

        Returns:
            The same filepath for convenience
        """
        if not self.tracking:
            return filepath
        self.install_exit_hook()
        self._files.append(filepath)
        logger.debug("Registered temp file: %s", filepath)
        return filepath

    def register_dir(self, dirpath: str) -> str:
        """Register a temporary directory for cleanup.

        Args:
            dirpath: Path of a directory that was just created

        Returns:
            The same dirpath for convenience
        """
        if not self.tracking:
            return dirpath
        self.install_exit_hook()
        self._dirs.append(dirpath)
        logger.debug("Registered temp dir: %s", dirpath)
        return dirpath

    def pending_files(self) -> list[str]:
        return list(self._files)

    def pending_dirs(self) -> list[str]:
        return list(self._dirs)

    def pop_file(self) -> Optional[str]:
        return self._files.popleft() if self._files else None

    def pop_dir(self) -> Optional[str]:
        return self._dirs.popleft() if self._dirs else None

    def take_files(self) -> list[str]:
        """Drain every pending file in one step."""
        drained = list(self._files)
        self._files.clear()
        return drained

    def take_dirs(self) -> list[str]:
        """Drain every pending directory in one step."""
        drained = list(self._dirs)
        self._dirs.clear()
        return drained

    def install_exit_hook(self) -> bool:
        """Install the exit cleanup handler unless it already is.

        Returns:
            True if this call installed the handler
        """
        if not self.tracking or self.exit_hook_installed:
            return False

        atexit.register(self._cleanup_on_exit)
        self.exit_hook_installed = True
        logger.debug("Installed exit cleanup handler")

        if self.handle_signals:
            self._install_sigterm_bridge()
        return True

    def _install_sigterm_bridge(self) -> None:
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on the main thread; SIGTERM handler not installed")
            return
        if signal.getsignal(signal.SIGTERM) is not signal.SIG_DFL:
            logger.debug("SIGTERM already handled; leaving it alone")
            return
        signal.signal(signal.SIGTERM, _exit_on_signal)
        logger.debug("Installed SIGTERM handler for exit cleanup")

    def _cleanup_on_exit(self) -> None:
        # The interpreter is shutting down: only the synchronous path is safe
        from .cleaner import cleanup_sync

        try:
            cleanup_sync(self)
        except Exception as e:
            logger.warning("Failed to clean temporary files on exit: %s", e)
            raise


# Global registry instance
_registry: Optional[TempRegistry] = None


def get_registry() -> TempRegistry:
    """Get the process-wide registry, creating it on first use."""
    global _registry
    if _registry is None:
        _registry = TempRegistry()
    return _registry
