"""Authorizer — one snapshot of routes and granted permissions.

Answers route-level and requirement-level checks with the matcher and
guards navigation: check the target route, then dispatch to the
navigation provider with no suspension in between.

Usage::

    from warden.authorizer import Authorizer
    from warden.matching import PermissionRequirement
    from warden.routes import NavigateOptions, RouteSpec

    authorizer = Authorizer(
        [RouteSpec("/a", (PermissionRequirement.of("article", "read"),))],
        {"article": ["read"]},
        navigator=my_navigator,
    )
    authorizer.authorize_route("/a")  # True
    await authorizer.navigate_forward(NavigateOptions("/a"))
"""

import inspect
import logging
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Any

from warden._internal.invoke import invoke
from warden.audit import emit_security_event
from warden.config import GateConfig
from warden.errors import AuthorizationDenied
from warden.matching import GrantedPermissions, PermissionRequirement, requirement_satisfied
from warden.navigation import NavigationKind, NavigationProvider, dispatcher
from warden.routes import BackOptions, NavigateOptions, RouteSpec

_log = logging.getLogger("warden.authorizer")


def _freeze_permissions(granted: GrantedPermissions | None) -> dict[str, tuple[str, ...]]:
    """Copy a caller's mapping so later mutation of it is not observed."""
    if not granted:
        return {}
    return {key: tuple(actions or ()) for key, actions in granted.items()}


class Authorizer:
    """Route and requirement checks over an immutable-until-replaced snapshot.

    Routes are fixed at construction. Granted permissions are replaced
    wholesale by ``update_granted_permissions()``; the old mapping is
    never mutated, so a check always sees one consistent snapshot.
    """

    __slots__ = ("_config", "_granted", "_navigator", "_routes")

    def __init__(
        self,
        routes: Iterable[RouteSpec] | None = None,
        granted_permissions: GrantedPermissions | None = None,
        *,
        navigator: NavigationProvider,
        config: GateConfig | None = None,
    ) -> None:
        self._routes: dict[str, RouteSpec] = {}
        for route in routes or ():
            # First declaration wins on duplicate ids
            self._routes.setdefault(route.id, route)
        self._granted = _freeze_permissions(granted_permissions)
        self._navigator = navigator
        self._config = config or GateConfig()

    @property
    def granted_permissions(self) -> Mapping[str, tuple[str, ...]]:
        """Read-only view of the current granted permissions."""
        return MappingProxyType(self._granted)

    @property
    def routes(self) -> tuple[RouteSpec, ...]:
        return tuple(self._routes.values())

    def update_granted_permissions(self, granted: GrantedPermissions | None) -> None:
        """Replace the granted permissions. No merge with prior state."""
        self._granted = _freeze_permissions(granted)

    # -- Checks ---------------------------------------------------------------

    def check_requirements(
        self,
        requirements: Sequence[PermissionRequirement] | None,
        match_any: bool = False,
    ) -> bool:
        """Return True if the requirements hold against current permissions.

        No requirements means no restriction. ``match_any`` needs at
        least one satisfied requirement; otherwise all must be satisfied.
        """
        if not requirements:
            return True
        granted = self._granted
        count = sum(1 for req in requirements if requirement_satisfied(req, granted))
        return count > 0 if match_any else count == len(requirements)

    def authorize_route(self, route_id: str) -> bool:
        """Return True if the caller may reach ``route_id``.

        Routes that were never configured are unrestricted.
        """
        route = self._routes.get(route_id)
        if route is None:
            return True
        return self.check_requirements(route.requirements, route.match_any)

    # -- Navigation -----------------------------------------------------------

    def dispatch(self, kind: NavigationKind, options: NavigateOptions) -> Any:
        """Check ``options.target_id`` and call the provider, synchronously.

        Returns whatever the provider returns, awaitable or not. Raises
        ``AuthorizationDenied`` when the route's requirements are
        unsatisfied. Provider errors propagate unmodified.
        """
        if not self.authorize_route(options.target_id):
            _log.info("Denied %s navigation to %r", kind.value, options.target_id)
            if self._config.audit:
                emit_security_event(
                    "navigation.denied", target_id=options.target_id, kind=kind.value
                )
            raise AuthorizationDenied(
                message=self._config.denied_message,
                code=self._config.denied_code,
                target_id=options.target_id,
            )
        return dispatcher(self._navigator, kind)(options)

    async def navigate(self, kind: NavigationKind, options: NavigateOptions) -> Any:
        """Like ``dispatch()``, awaiting the provider's outcome."""
        outcome = self.dispatch(kind, options)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        return outcome

    async def navigate_forward(self, options: NavigateOptions) -> Any:
        return await self.navigate(NavigationKind.FORWARD, options)

    async def navigate_replace(self, options: NavigateOptions) -> Any:
        return await self.navigate(NavigationKind.REPLACE, options)

    async def navigate_switch_tab(self, options: NavigateOptions) -> Any:
        return await self.navigate(NavigationKind.SWITCH_TAB, options)

    async def navigate_back(self, options: BackOptions | None = None) -> Any:
        """Navigate back without any permission check.

        If the provider fails, switch to the configured home route
        instead of raising. A failing fallback is logged and yields
        ``None``.
        """
        home = self._config.home_route
        try:
            return await invoke(self._navigator.back, options or BackOptions())
        except Exception:
            _log.warning("Back navigation failed; falling back to %r", home, exc_info=True)
            if self._config.audit:
                emit_security_event("navigation.fallback", target_id=home, kind="back")
        try:
            return await invoke(self._navigator.switch_tab, NavigateOptions(target_id=home))
        except Exception:
            _log.exception("Home fallback to %r failed", home)
            return None
