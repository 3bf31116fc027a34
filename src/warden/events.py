"""Gate event bus — multicast lifecycle notifications.

The gate publishes two zero-payload events:

- ``initialized`` — an authorizer was installed by ``init()``
- ``permissionsUpdated`` — granted permissions were replaced

Presentation code subscribes to re-run checks reactively. Listeners
are plain zero-argument callables; a listener that needs async work
schedules it itself.

Usage::

    from warden.events import INITIALIZED, GateEventBus

    bus = GateEventBus()
    unsubscribe = bus.on(INITIALIZED, lambda: print("ready"))
    bus.emit(INITIALIZED)
    unsubscribe()

Free-threading safety:
    - The listener table is guarded by a Lock
    - ``emit()`` snapshots listeners before calling them, so a listener
      may subscribe or unsubscribe during delivery
"""

import logging
import threading
from collections.abc import Callable
from typing import TypeAlias

from warden._internal.invoke import is_async_callable
from warden.errors import ConfigurationError

_log = logging.getLogger("warden.events")

INITIALIZED = "initialized"
PERMISSIONS_UPDATED = "permissionsUpdated"

EVENT_NAMES: frozenset[str] = frozenset({INITIALIZED, PERMISSIONS_UPDATED})

Listener: TypeAlias = Callable[[], None]


class GateEventBus:
    """Per-event listener registry with fire-and-forget delivery."""

    __slots__ = ("_listeners", "_lock")

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {name: [] for name in EVENT_NAMES}
        self._lock = threading.Lock()

    def on(self, name: str, listener: Listener) -> Callable[[], None]:
        """Subscribe ``listener`` to ``name``. Returns an unsubscribe callable."""
        self._validate(name)
        if is_async_callable(listener):
            msg = (
                f"Listener {listener!r} is async. Gate events are delivered "
                "synchronously; schedule async work from a sync listener."
            )
            raise ConfigurationError(msg)
        with self._lock:
            self._listeners[name].append(listener)

        def unsubscribe() -> None:
            self.off(name, listener)

        return unsubscribe

    def off(self, name: str, listener: Listener) -> None:
        """Remove one subscription of ``listener``. Unknown listeners are ignored."""
        self._validate(name)
        with self._lock:
            listeners = self._listeners[name]
            if listener in listeners:
                listeners.remove(listener)

    def emit(self, name: str) -> None:
        """Call every listener of ``name``.

        A failing listener is logged and does not stop delivery to the
        others.
        """
        self._validate(name)
        with self._lock:
            listeners = list(self._listeners[name])
        for listener in listeners:
            try:
                listener()
            except Exception:
                _log.exception("Listener %r for %r raised", listener, name)

    def listener_count(self, name: str) -> int:
        self._validate(name)
        with self._lock:
            return len(self._listeners[name])

    def clear(self) -> None:
        """Drop every subscription."""
        with self._lock:
            for listeners in self._listeners.values():
                listeners.clear()

    @staticmethod
    def _validate(name: str) -> None:
        if name not in EVENT_NAMES:
            allowed = ", ".join(sorted(EVENT_NAMES))
            msg = f"Unknown gate event {name!r}. Expected one of: {allowed}"
            raise ConfigurationError(msg)
