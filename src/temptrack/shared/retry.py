"""Retry utilities for filesystem operations that hit busy resources."""

import asyncio
import errno
import logging
import os
import time
from collections.abc import Callable
from functools import wraps
from typing import Any

from ..constants import BUSY_RETRY_DELAY, DEFAULT_MAX_BUSY_TRIES

logger = logging.getLogger(__name__)

BUSY_ERRNOS = frozenset({errno.EBUSY, errno.ENOTEMPTY})
if os.name == "nt":
    # Windows reports open handles as permission errors
    BUSY_ERRNOS |= {errno.EPERM, errno.EACCES}


def is_transient_busy_error(exception: BaseException) -> bool:
    """Check if an exception is a "resource busy" condition worth retrying.

    Args:
        exception: The exception to check

    Returns:
        True if the error is transient and should be retried
    """
    if not isinstance(exception, OSError):
        return False
    return getattr(exception, "errno", None) in BUSY_ERRNOS


def _resolve_attempts(max_attempts: Any, kwargs: dict) -> int:
    # Callers may override the attempt count per call
    return kwargs.pop("max_busy_tries", None) or max_attempts


def retry_on_busy(
    max_attempts: int = DEFAULT_MAX_BUSY_TRIES,
    initial_delay: float = BUSY_RETRY_DELAY,
    should_retry: Callable[[BaseException], bool] = is_transient_busy_error,
):
    """Decorator to retry a blocking filesystem call on busy errors.

    Only retries when ``should_retry`` accepts the exception. The delay grows
    linearly with the attempt number. The wrapped function accepts an extra
    ``max_busy_tries`` keyword to override ``max_attempts`` per call.

    Example:
        @retry_on_busy(max_attempts=6)
        def remove(path):
            shutil.rmtree(path)
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            attempts = _resolve_attempts(max_attempts, kwargs)

            for attempt in range(1, attempts + 1):
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    if not should_retry(e):
                        raise

                    if attempt == attempts:
                        logger.error(f"{func.__name__} failed after {attempts} attempts: {e}")
                        raise

                    current_delay = initial_delay * attempt
                    logger.warning(
                        f"{func.__name__} hit a busy resource (attempt {attempt}/{attempts}): {e}. "
                        f"Retrying in {current_delay:.1f}s..."
                    )
                    time.sleep(current_delay)

        return wrapper

    return decorator


def async_retry_on_busy(
    max_attempts: int = DEFAULT_MAX_BUSY_TRIES,
    initial_delay: float = BUSY_RETRY_DELAY,
    should_retry: Callable[[BaseException], bool] = is_transient_busy_error,
):
    """Coroutine counterpart of :func:`retry_on_busy`.

    Waits with ``asyncio.sleep`` so the event loop keeps running between
    attempts.
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            attempts = _resolve_attempts(max_attempts, kwargs)

            for attempt in range(1, attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if not should_retry(e):
                        raise

                    if attempt == attempts:
                        logger.error(f"{func.__name__} failed after {attempts} attempts: {e}")
                        raise

                    current_delay = initial_delay * attempt
                    logger.warning(
                        f"{func.__name__} hit a busy resource (attempt {attempt}/{attempts}): {e}. "
                        f"Retrying in {current_delay:.1f}s..."
                    )
                    await asyncio.sleep(current_delay)

        return wrapper

    return decorator
