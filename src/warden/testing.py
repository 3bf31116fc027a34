"""Test utilities for warden applications.

``FakeNavigator`` is an in-memory navigation provider that records
every call and can be told to fail per primitive. The assertion
helpers produce clear messages on failure::

    from warden.testing import FakeNavigator, assert_navigated

    nav = FakeNavigator()
    gate = AccessGate(nav)
    await gate.init(routes, perms)
    await gate.navigate_forward(NavigateOptions("/a"))
    assert_navigated(nav, "forward", "/a")
"""

from dataclasses import dataclass, field
from typing import Any

import anyio

from warden.errors import AuthorizationDenied
from warden.routes import BackOptions, NavigateOptions


@dataclass(frozen=True, slots=True)
class NavigationCall:
    """One recorded provider call."""

    kind: str
    options: NavigateOptions | BackOptions

    @property
    def target_id(self) -> str | None:
        return getattr(self.options, "target_id", None)


@dataclass(slots=True)
class FakeNavigator:
    """Recording navigation provider.

    Put a primitive name (``"forward"``, ``"replace"``, ``"switch_tab"``,
    ``"back"``) in ``failures`` to make it raise ``error``. A non-zero
    ``delay`` makes every call sleep first.
    """

    failures: set[str] = field(default_factory=set)
    error: Exception = field(default_factory=lambda: RuntimeError("navigation failed"))
    calls: list[NavigationCall] = field(default_factory=list)
    delay: float = 0.0

    async def _record(self, kind: str, options: NavigateOptions | BackOptions) -> dict[str, Any]:
        self.calls.append(NavigationCall(kind, options))
        if self.delay:
            await anyio.sleep(self.delay)
        if kind in self.failures:
            raise self.error
        return {"ok": True, "kind": kind, "target_id": getattr(options, "target_id", None)}

    async def forward(self, options: NavigateOptions) -> dict[str, Any]:
        return await self._record("forward", options)

    async def replace(self, options: NavigateOptions) -> dict[str, Any]:
        return await self._record("replace", options)

    async def switch_tab(self, options: NavigateOptions) -> dict[str, Any]:
        return await self._record("switch_tab", options)

    async def back(self, options: BackOptions) -> dict[str, Any]:
        return await self._record("back", options)

    def targets(self, kind: str | None = None) -> list[str | None]:
        """Return recorded target ids, optionally for one primitive."""
        return [c.target_id for c in self.calls if kind is None or c.kind == kind]


def assert_navigated(navigator: FakeNavigator, kind: str, target_id: str) -> None:
    """Assert the navigator received ``kind`` navigation to ``target_id``."""
    assert target_id in navigator.targets(kind), (
        f"Expected {kind} navigation to {target_id!r}.\n"
        f"Recorded calls: {navigator.calls!r}"
    )


def assert_not_navigated(navigator: FakeNavigator, target_id: str) -> None:
    """Assert no primitive navigated to ``target_id``."""
    assert target_id not in navigator.targets(), (
        f"Unexpected navigation to {target_id!r}.\n"
        f"Recorded calls: {navigator.calls!r}"
    )


def assert_denied(error: BaseException, *, code: int = 401) -> None:
    """Assert ``error`` is an ``AuthorizationDenied`` with ``code``."""
    assert isinstance(error, AuthorizationDenied), (
        f"Expected AuthorizationDenied, got {type(error).__name__}: {error!r}"
    )
    assert error.code == code, f"Expected denial code {code}, got {error.code}"
