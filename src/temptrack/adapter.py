"""Callback / awaitable dual calling convention.

Asynchronous operations in temptrack are coroutines. Their public wrappers
accept an optional ``callback``; without one they return an awaitable future,
with one they return ``None`` and report through ``callback(error, *results)``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Optional

from .shared.validators import validate_callback

NodeCallback = Callable[..., Any]


def promisify(callback: Optional[NodeCallback] = None) -> tuple[Optional[asyncio.Future], NodeCallback]:
    """Return ``(future, callback)`` for an operation.

    With a caller supplied callback the future is ``None`` and the callback is
    returned unchanged. Otherwise a new future is created on the running loop
    together with a callback that settles it following the ``(error,
    *results)`` convention: no results resolves to ``None``, one result to that
    value, several to a list. Settlement is scheduled with
    ``call_soon_threadsafe`` so it never happens inside the settling call.

    Raises:
        ValidationError: If callback is neither None nor callable
        RuntimeError: If no event loop is running and no callback was given
    """
    if validate_callback(callback) is not None:
        return None, callback

    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def settle(error: Optional[BaseException] = None, *results: Any) -> None:
        def _apply() -> None:
            if future.done():
                return
            if isinstance(error, asyncio.CancelledError):
                future.cancel()
            elif error is not None:
                future.set_exception(error)
            elif not results:
                future.set_result(None)
            elif len(results) == 1:
                future.set_result(results[0])
            else:
                future.set_result(list(results))

        loop.call_soon_threadsafe(_apply)

    return future, settle


def _deliver(callback: NodeCallback, task: asyncio.Task, partial_result: Callable[[BaseException], Any]) -> None:
    if task.cancelled():
        callback(asyncio.CancelledError())
        return
    error = task.exception()
    if error is not None:
        result = partial_result(error)
        if result is None:
            callback(error)
        else:
            callback(error, result)
        return
    callback(None, task.result())


def run_with_callback(
    start: Callable[[], Awaitable],
    callback: Optional[NodeCallback] = None,
    *,
    partial_result: Callable[[BaseException], Any] = lambda error: None,
) -> Optional[asyncio.Future]:
    """Start an operation on the running loop and report through the adapter.

    ``start`` is called only after the callback was validated and a loop was
    found; anything it raises propagates synchronously. The awaitable it
    returns runs as a task whose outcome is delivered to the callback or
    future.

    ``partial_result`` extracts the value passed next to an error (for example
    partial cleanup counts); returning None passes the error alone.
    """
    future, settle = promisify(callback)
    # The callback form needs a running loop as well
    asyncio.get_running_loop()

    task = asyncio.ensure_future(start())
    task.add_done_callback(lambda done: _deliver(settle, done, partial_result))
    return future
