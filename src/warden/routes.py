"""RouteSpec and navigation option frozen dataclasses."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from warden.matching import PermissionRequirement


@dataclass(frozen=True, slots=True)
class RouteSpec:
    """A guarded route definition.

    ``match_any=True`` means at least one requirement must hold;
    otherwise all of them must. A route with no requirements is open.
    """

    id: str
    requirements: tuple[PermissionRequirement, ...] = ()
    match_any: bool = False


@dataclass(frozen=True, slots=True)
class NavigateOptions:
    """Options for forward, replace, and switch-tab navigation.

    ``extras`` is passed through to the provider untouched.
    """

    target_id: str
    extras: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class BackOptions:
    """Options for back navigation."""

    delta: int = 1
    extras: Mapping[str, Any] = field(default_factory=dict)
