"""Warden — a client-side authorization gate for route navigation.

Checks whether the caller may reach a route or perform actions on a
resource, and guards forward, replace, and switch-tab navigation
behind that check. Calls made before permissions have loaded are
queued and resolved in order once the gate is initialized.

Basic usage::

    import re

    from warden import AccessGate, NavigateOptions, PermissionRequirement, RouteSpec

    gate = AccessGate(navigator)
    await gate.init(
        [
            RouteSpec("/articles", (PermissionRequirement.of("article", "read"),)),
            RouteSpec(
                "/system",
                (PermissionRequirement.of(re.compile(r"^sys:.+$"), "manage"),),
                match_any=True,
            ),
        ],
        {"article": ["read"], "sys:role": ["*"]},
    )
    gate.authorize_route("/articles")  # True
    await gate.navigate_forward(NavigateOptions("/system"))
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "AccessGate",
    "AuthorizationDenied",
    "Authorizer",
    "BackOptions",
    "CallAborted",
    "ConfigurationError",
    "Deferred",
    "Exact",
    "GateConfig",
    "GateEventBus",
    "GateState",
    "INITIALIZED",
    "InvalidStateError",
    "NavigateOptions",
    "NavigationKind",
    "NavigationProvider",
    "PERMISSIONS_UPDATED",
    "Pattern",
    "PermissionGuard",
    "PermissionRequirement",
    "RouteSpec",
    "RouteWatcher",
    "UninitializedError",
    "WardenError",
    "actions_satisfy",
    "requirement_satisfied",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import warden`` fast while providing a clean top-level API.
    """
    if name in ("AccessGate", "Deferred", "GateState"):
        from warden import lifecycle as _lifecycle

        return getattr(_lifecycle, name)

    if name == "Authorizer":
        from warden.authorizer import Authorizer

        return Authorizer

    if name == "GateConfig":
        from warden.config import GateConfig

        return GateConfig

    if name in ("Exact", "Pattern", "PermissionRequirement", "actions_satisfy", "requirement_satisfied"):
        from warden import matching as _matching

        return getattr(_matching, name)

    if name in ("BackOptions", "NavigateOptions", "RouteSpec"):
        from warden import routes as _routes

        return getattr(_routes, name)

    if name in ("NavigationKind", "NavigationProvider"):
        from warden import navigation as _navigation

        return getattr(_navigation, name)

    if name in ("GateEventBus", "INITIALIZED", "PERMISSIONS_UPDATED"):
        from warden import events as _events

        return getattr(_events, name)

    if name == "RouteWatcher":
        from warden.watch import RouteWatcher

        return RouteWatcher

    if name == "PermissionGuard":
        from warden.guard import PermissionGuard

        return PermissionGuard

    if name in (
        "AuthorizationDenied",
        "CallAborted",
        "ConfigurationError",
        "InvalidStateError",
        "UninitializedError",
        "WardenError",
    ):
        from warden import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
