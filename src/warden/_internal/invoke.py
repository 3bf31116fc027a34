"""Invoke helpers — call sync or async callables uniformly.

Navigation providers and listeners can be ``def`` or ``async def``.
Any code that calls a user-provided callable must handle both cases.
This module keeps the sync/async check in exactly one place.

Usage::

    from warden._internal.invoke import invoke

    outcome = await invoke(navigator.forward, options)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call ``func`` and await the result if it's awaitable.

    Works with both sync and async providers::

        class SyncNavigator:
            def forward(self, options):
                return {"ok": True}

        class AsyncNavigator:
            async def forward(self, options):
                return await platform.navigate(options.target_id)
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def is_async_callable(func: Any) -> bool:
    """Return True if calling ``func`` produces a coroutine."""
    if inspect.iscoroutinefunction(func):
        return True
    call = getattr(func, "__call__", None)  # noqa: B004
    return call is not None and inspect.iscoroutinefunction(call)
