"""AccessGate — deferred-initialization lifecycle around an Authorizer.

Routes and granted permissions usually arrive after the application
has started using the gate. Until ``init()`` runs, guarded calls are
queued and resolved later, in call order, exactly once:

- ``authorize_route()`` answers ``True`` while uninitialized so
  rendering is never blocked by configuration that hasn't loaded
- ``authorize_route_async()``, ``update_granted_permissions()`` and the
  ``navigate_*`` methods return a ``Deferred``; before ``init()`` the
  call is queued, after it the check runs at call time
- ``navigate_back()`` is never queued and never checked

Usage::

    from warden import AccessGate, NavigateOptions

    async with AccessGate(navigator) as gate:
        pending = gate.navigate_forward(NavigateOptions("/orders"))  # queued
        await gate.init(routes, await load_permissions())          # drains queue
        outcome = await pending

Inside ``async with`` the gate runs calls in its own task group, so a
handle nobody awaits still settles. Without it, a call made after
``init()`` runs when its handle is first awaited.

The gate is an explicit object owned by the application's composition
root; pass it to whatever needs it rather than reaching for a global.
"""

from __future__ import annotations

import inspect
import logging
from collections import deque
from collections.abc import Awaitable, Callable, Iterable, Sequence
from contextlib import AsyncExitStack
from enum import StrEnum
from typing import Any, Generic, TypeAlias, TypeVar

import anyio
from anyio.abc import TaskGroup

from warden._internal.invoke import invoke
from warden.audit import emit_security_event
from warden.authorizer import Authorizer
from warden.config import GateConfig
from warden.errors import CallAborted, InvalidStateError, UninitializedError
from warden.events import INITIALIZED, PERMISSIONS_UPDATED, GateEventBus
from warden.matching import GrantedPermissions, PermissionRequirement
from warden.navigation import NavigationKind, NavigationProvider
from warden.routes import BackOptions, NavigateOptions, RouteSpec

_log = logging.getLogger("warden.gate")

DeferredTask: TypeAlias = Callable[[], Awaitable[None]]

T = TypeVar("T")

_UNSET: Any = object()


class Deferred(Generic[T]):
    """A result handle created at call time and settled exactly once.

    Awaitable any number of times. A handle may carry a driver: awaiting
    a pending handle runs the driver first, so an awaited handle never
    waits on work that nobody started.
    """

    __slots__ = ("_driver", "_error", "_event", "_value")

    def __init__(self, driver: Callable[[], Awaitable[None]] | None = None) -> None:
        self._driver = driver
        self._value: Any = _UNSET
        self._error: BaseException | None = None
        # Created on first wait so handles can be made from sync code
        self._event: anyio.Event | None = None

    @classmethod
    def resolved(cls, value: T) -> Deferred[T]:
        deferred: Deferred[T] = cls()
        deferred.set_result(value)
        return deferred

    @classmethod
    def rejected(cls, error: BaseException) -> Deferred[T]:
        deferred: Deferred[T] = cls()
        deferred.set_exception(error)
        return deferred

    def done(self) -> bool:
        return self._value is not _UNSET or self._error is not None

    def set_result(self, value: T) -> None:
        self._settle(value, None)

    def set_exception(self, error: BaseException) -> None:
        self._settle(_UNSET, error)

    def result(self) -> T:
        """Return the value, raise the stored error, or fail if pending."""
        if not self.done():
            msg = "Deferred result is not ready."
            raise InvalidStateError(msg)
        if self._error is not None:
            raise self._error
        return self._value

    def exception(self) -> BaseException | None:
        if not self.done():
            msg = "Deferred result is not ready."
            raise InvalidStateError(msg)
        return self._error

    async def wait(self) -> T:
        if not self.done() and self._driver is not None:
            await self._driver()
        if not self.done():
            if self._event is None:
                self._event = anyio.Event()
            await self._event.wait()
        return self.result()

    def __await__(self):
        return self.wait().__await__()

    def _settle(self, value: Any, error: BaseException | None) -> None:
        if self.done():
            msg = "Deferred is already settled."
            raise InvalidStateError(msg)
        self._value = value
        self._error = error
        self._driver = None
        if self._event is not None:
            self._event.set()

    def __repr__(self) -> str:
        if not self.done():
            return "<Deferred pending>"
        if self._error is not None:
            return f"<Deferred error={self._error!r}>"
        return f"<Deferred result={self._value!r}>"


async def _settle_from(deferred: Deferred[Any], call: Callable[[], Any]) -> None:
    """Run ``call`` and settle ``deferred`` with its outcome.

    Cancellation settles the handle with ``CallAborted`` and keeps
    propagating, so no waiter is left hanging.
    """
    try:
        value = await invoke(call)
    except Exception as exc:
        _log.debug("Call %r failed: %r", call, exc)
        deferred.set_exception(exc)
    except BaseException as exc:
        error = CallAborted("Call was cancelled before it finished.")
        error.__cause__ = exc
        deferred.set_exception(error)
        raise
    else:
        deferred.set_result(value)


class GateState(StrEnum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"


class AccessGate:
    """Lifecycle manager: zero-or-one authorizer plus a FIFO of deferred calls.

    Free-threading note:
        The gate is meant for one event loop. It holds no locks; the
        ``_flushing`` flag only guards against re-entrant drains.
    """

    __slots__ = (
        "_authorizer",
        "_config",
        "_events",
        "_exit_stack",
        "_flushing",
        "_navigator",
        "_queue",
        "_task_group",
    )

    def __init__(
        self,
        navigator: NavigationProvider,
        *,
        config: GateConfig | None = None,
        events: GateEventBus | None = None,
    ) -> None:
        self._navigator = navigator
        self._config = config or GateConfig()
        self._events = events or GateEventBus()
        self._authorizer: Authorizer | None = None
        self._queue: deque[DeferredTask] = deque()
        self._flushing = False
        self._task_group: TaskGroup | None = None
        self._exit_stack: AsyncExitStack | None = None

    async def __aenter__(self) -> AccessGate:
        if self._exit_stack is not None:
            msg = "AccessGate is already running."
            raise RuntimeError(msg)
        stack = AsyncExitStack()
        self._task_group = await stack.enter_async_context(anyio.create_task_group())
        self._exit_stack = stack
        return self

    async def __aexit__(self, *exc_info: Any) -> bool | None:
        stack, self._exit_stack = self._exit_stack, None
        if stack is None:
            return None
        try:
            return await stack.__aexit__(*exc_info)
        finally:
            self._task_group = None

    # -- State ----------------------------------------------------------------

    @property
    def state(self) -> GateState:
        if self._authorizer is None:
            return GateState.UNINITIALIZED
        return GateState.INITIALIZED

    @property
    def is_initialized(self) -> bool:
        return self._authorizer is not None

    @property
    def authorizer(self) -> Authorizer | None:
        return self._authorizer

    @property
    def events(self) -> GateEventBus:
        return self._events

    @property
    def config(self) -> GateConfig:
        return self._config

    @property
    def pending(self) -> int:
        """Number of deferred calls waiting to run."""
        return len(self._queue)

    # -- Lifecycle ------------------------------------------------------------

    async def init(
        self,
        routes: Iterable[RouteSpec] | None = None,
        granted_permissions: GrantedPermissions | None = None,
    ) -> None:
        """Install a fresh authorizer and drain the deferred queue.

        Calling ``init()`` again replaces the authorizer. A drain already
        in progress keeps going and runs its remaining calls against the
        new authorizer.
        """
        self._authorizer = Authorizer(
            routes,
            granted_permissions,
            navigator=self._navigator,
            config=self._config,
        )
        _log.debug("Gate initialized with %d pending call(s)", len(self._queue))
        if self._config.audit:
            emit_security_event("gate.initialized", details={"pending": len(self._queue)})
        self._events.emit(INITIALIZED)
        await self.flush()

    async def flush(self) -> None:
        """Run deferred calls in FIFO order until the queue is empty.

        No-op while uninitialized or while another drain is running.
        Calls queued during the drain run in the same drain. A failing
        call settles only its own handle. If the drain is cancelled, the
        running call settles with ``CallAborted`` and the rest stay queued.
        """
        if self._flushing or self._authorizer is None:
            return
        self._flushing = True
        try:
            while self._queue:
                task = self._queue.popleft()
                await task()
        finally:
            self._flushing = False

    def _schedule_flush(self) -> None:
        if self._task_group is not None and self._authorizer is not None and not self._flushing:
            self._task_group.start_soon(self.flush)

    def defer(self, task: Callable[[], T | Awaitable[T]]) -> Deferred[T]:
        """Queue ``task`` to run after initialization, behind earlier calls.

        ``task`` may be sync or async. Its return value or exception
        settles the returned handle. Once initialized, the drain starts
        in the gate's task group, or when the handle is awaited. A queued
        task must not await a handle it defers itself: the drain runs one
        task at a time.
        """
        deferred: Deferred[T] = Deferred(driver=self.flush)

        async def run() -> None:
            await _settle_from(deferred, task)

        self._queue.append(run)
        _log.debug("Deferred call queued (%d pending)", len(self._queue))
        self._schedule_flush()
        return deferred

    def _start(self, call: Callable[[], Any]) -> Deferred[Any]:
        """Run ``call`` outside the queue, at most once.

        Scheduled in the gate's task group when there is one; otherwise
        the first await of the handle runs it.
        """
        started = False

        async def run() -> None:
            nonlocal started
            if started:
                return
            started = True
            await _settle_from(deferred, call)

        deferred: Deferred[Any] = Deferred(driver=run)
        if self._task_group is not None:
            self._task_group.start_soon(run)
        return deferred

    def _require_authorizer(self) -> Authorizer:
        if self._authorizer is None:
            msg = "Deferred call ran without an authorizer; was the gate torn down?"
            raise UninitializedError(msg)
        return self._authorizer

    # -- Permissions ----------------------------------------------------------

    def update_granted_permissions(self, granted: GrantedPermissions | None) -> Deferred[None]:
        """Replace granted permissions now, or once the gate is initialized."""
        if self._authorizer is None:
            return self.defer(lambda: self._apply_permissions(granted))
        self._apply_permissions(granted)
        return Deferred.resolved(None)

    def _apply_permissions(self, granted: GrantedPermissions | None) -> None:
        self._require_authorizer().update_granted_permissions(granted)
        if self._config.audit:
            emit_security_event(
                "gate.permissions_updated", details={"resources": len(granted or {})}
            )
        self._events.emit(PERMISSIONS_UPDATED)

    # -- Checks ---------------------------------------------------------------

    def authorize_route(self, route_id: str) -> bool:
        """Return True if the caller may reach ``route_id``.

        Always True before ``init()``; use ``authorize_route_async()``
        for the answer the configured permissions will give.
        """
        if self._authorizer is None:
            return True
        return self._authorizer.authorize_route(route_id)

    def authorize_route_async(self, route_id: str) -> Deferred[bool]:
        """Return a handle resolving to the post-initialization answer."""
        if self._authorizer is not None:
            return Deferred.resolved(self._authorizer.authorize_route(route_id))
        return self.defer(lambda: self._require_authorizer().authorize_route(route_id))

    def check_requirements(
        self,
        requirements: Sequence[PermissionRequirement] | None,
        match_any: bool = False,
    ) -> bool:
        """Check ad-hoc requirements. Always True before ``init()``."""
        if self._authorizer is None:
            return True
        return self._authorizer.check_requirements(requirements, match_any)

    # -- Navigation -----------------------------------------------------------

    def navigate(self, kind: NavigationKind, options: NavigateOptions) -> Deferred[Any]:
        """Check and dispatch now, or queue the whole check-and-dispatch.

        Once initialized, the route check and the provider call happen
        before this returns. The handle rejects with ``AuthorizationDenied``
        when the target route is refused; provider errors propagate
        unmodified.
        """
        if self._authorizer is None:
            return self.defer(lambda: self._require_authorizer().navigate(kind, options))
        try:
            outcome = self._authorizer.dispatch(kind, options)
        except Exception as exc:
            return Deferred.rejected(exc)
        if not inspect.isawaitable(outcome):
            return Deferred.resolved(outcome)
        return self._start(lambda: outcome)

    def navigate_forward(self, options: NavigateOptions) -> Deferred[Any]:
        return self.navigate(NavigationKind.FORWARD, options)

    def navigate_replace(self, options: NavigateOptions) -> Deferred[Any]:
        return self.navigate(NavigationKind.REPLACE, options)

    def navigate_switch_tab(self, options: NavigateOptions) -> Deferred[Any]:
        return self.navigate(NavigationKind.SWITCH_TAB, options)

    def navigate_back(self, options: BackOptions | None = None) -> Deferred[Any]:
        """Go back immediately. Never queued, never permission-checked.

        Before ``init()`` the provider is called directly, without the
        authorizer's home fallback.
        """
        authorizer = self._authorizer
        if authorizer is not None:
            return self._start(lambda: authorizer.navigate_back(options))
        return self._start(lambda: self._navigator.back(options or BackOptions()))
