"""Permission matching — pure functions over granted permissions.

A requirement names a resource (an exact key or a regex pattern) and
the actions it needs. Granted permissions map resource keys to the
actions the caller may perform; the single token ``"*"`` grants every
action on that key.

Usage::

    from warden.matching import PermissionRequirement, requirement_satisfied

    req = PermissionRequirement.of("article", "read")
    requirement_satisfied(req, {"article": ["read", "write"]})  # True

    req = PermissionRequirement.of(re.compile(r"^sys:.+$"), "manage")
    requirement_satisfied(req, {"sys:role": ["manage"], "sys:user": ["*"]})  # True
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import TypeAlias

WILDCARD = "*"

GrantedPermissions: TypeAlias = Mapping[str, Sequence[str]]


@dataclass(frozen=True, slots=True)
class Exact:
    """Match exactly one resource key."""

    key: str


@dataclass(frozen=True, slots=True)
class Pattern:
    """Match every granted key the regex finds a match in.

    Uses ``re.search`` — anchor the pattern to match whole keys.
    """

    regex: re.Pattern[str]


ResourceMatcher: TypeAlias = Exact | Pattern


@dataclass(frozen=True, slots=True)
class PermissionRequirement:
    """A resource matcher plus the actions it requires.

    A plain ``str`` or compiled pattern passed as ``resource`` is wrapped
    in ``Exact`` or ``Pattern``. An empty ``actions`` tuple is satisfied
    by any non-empty grant.
    """

    resource: ResourceMatcher | str | re.Pattern[str]
    actions: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "resource", as_matcher(self.resource))
        object.__setattr__(self, "actions", tuple(self.actions))

    @classmethod
    def of(cls, resource: str | re.Pattern[str], *actions: str) -> PermissionRequirement:
        """Build a requirement from a plain key or a compiled pattern."""
        return cls(resource=resource, actions=actions)


def as_matcher(resource: str | re.Pattern[str] | ResourceMatcher) -> ResourceMatcher:
    """Wrap a plain key or compiled regex in the matching variant."""
    match resource:
        case Exact() | Pattern():
            return resource
        case re.Pattern():
            return Pattern(resource)
        case str():
            return Exact(resource)
    msg = f"Resource must be a str or compiled pattern, got {type(resource).__name__}"
    raise TypeError(msg)


def actions_satisfy(required: Iterable[str], granted: Sequence[str] | None) -> bool:
    """Return True if ``granted`` covers every action in ``required``."""
    if not granted:
        return False
    if "".join(granted) == WILDCARD:
        return True
    return all(action in granted for action in required)


def matching_keys(pattern: re.Pattern[str], granted: GrantedPermissions) -> list[str]:
    """Return granted keys the pattern finds a match in, in mapping order."""
    return [key for key in granted if pattern.search(key)]


def requirement_satisfied(req: PermissionRequirement, granted: GrantedPermissions) -> bool:
    """Return True if ``granted`` satisfies one requirement.

    A pattern requirement holds only when at least one key matches and
    every matched key grants the required actions.
    """
    match req.resource:
        case Pattern(regex=regex):
            keys = matching_keys(regex, granted)
            if not keys:
                return False
            return all(actions_satisfy(req.actions, granted[key]) for key in keys)
        case Exact(key=key):
            return actions_satisfy(req.actions, granted.get(key))
        case other:
            msg = f"Unsupported resource matcher: {other!r}"
            raise TypeError(msg)
