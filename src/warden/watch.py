"""RouteWatcher — re-run a route check when the gate's permissions change.

Framework-neutral state holder for UI code: ``can_access``, ``loading``
and ``error``, refreshed through ``authorize_route_async()`` so the
answer reflects the configured permissions rather than the permissive
pre-initialization default.

Gate events are delivered synchronously, so the watcher only marks
itself stale on ``initialized`` / ``permissionsUpdated``; the caller's
render loop picks that up and awaits ``refresh()``. Pass ``on_change``
to be told when that happens.

Usage::

    with RouteWatcher(gate, "/orders") as watcher:
        await watcher.refresh()
        if watcher.can_access:
            ...
        if watcher.needs_refresh:
            await watcher.refresh()
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from warden.events import INITIALIZED, PERMISSIONS_UPDATED
from warden.lifecycle import AccessGate

_log = logging.getLogger("warden.watch")


class RouteWatcher:
    """Tracks access to one route across gate lifecycle events."""

    __slots__ = (
        "_gate",
        "_on_change",
        "_unsubscribers",
        "can_access",
        "error",
        "loading",
        "needs_refresh",
        "route_id",
    )

    def __init__(
        self,
        gate: AccessGate,
        route_id: str,
        *,
        immediate: bool = True,
        default: bool = False,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._gate = gate
        self._on_change = on_change
        self.route_id = route_id
        self.can_access = default
        self.error: Exception | None = None
        self.loading = immediate
        self.needs_refresh = immediate
        self._unsubscribers = [
            gate.events.on(INITIALIZED, self._mark_stale),
            gate.events.on(PERMISSIONS_UPDATED, self._mark_stale),
        ]

    @property
    def closed(self) -> bool:
        return not self._unsubscribers

    def _mark_stale(self) -> None:
        self.needs_refresh = True
        if self._on_change is not None:
            self._on_change()

    async def refresh(self) -> bool:
        """Re-check the route. Errors are recorded on ``error`` and re-raised."""
        self.loading = True
        self.error = None
        self.needs_refresh = False
        try:
            ok = await self._gate.authorize_route_async(self.route_id)
        except Exception as exc:
            _log.debug("Route check for %r failed: %r", self.route_id, exc)
            if not self.closed:
                self.error = exc
            raise
        else:
            if not self.closed:
                self.can_access = ok
            return ok
        finally:
            if not self.closed:
                self.loading = False

    def close(self) -> None:
        """Stop listening to gate events. Idempotent."""
        while self._unsubscribers:
            self._unsubscribers.pop()()

    def __enter__(self) -> RouteWatcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
