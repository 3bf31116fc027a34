"""Navigation provider protocol.

The platform layer that actually moves between screens. Warden never
navigates on its own; it checks permissions and then delegates here.
Every method may be ``def`` or ``async def`` and may raise to signal a
platform failure.
"""

from enum import StrEnum
from typing import Any, Protocol, runtime_checkable

from warden.routes import BackOptions, NavigateOptions


class NavigationKind(StrEnum):
    """The permission-checked navigation primitives."""

    FORWARD = "forward"
    REPLACE = "replace"
    SWITCH_TAB = "switch_tab"


@runtime_checkable
class NavigationProvider(Protocol):
    """Platform navigation primitives.

    ``switch_tab`` doubles as the home fallback used when back
    navigation fails.
    """

    def forward(self, options: NavigateOptions) -> Any: ...

    def replace(self, options: NavigateOptions) -> Any: ...

    def switch_tab(self, options: NavigateOptions) -> Any: ...

    def back(self, options: BackOptions) -> Any: ...


def dispatcher(navigator: NavigationProvider, kind: NavigationKind) -> Any:
    """Return the provider method for a navigation kind."""
    return getattr(navigator, kind.value)
