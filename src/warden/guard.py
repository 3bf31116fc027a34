"""PermissionGuard — show content only when requirements hold.

The framework-neutral counterpart of a permission-gated wrapper
component. It asks the gate on every ``render()``, so it follows
permission updates without subscribing to anything.

Usage::

    guard = PermissionGuard(
        gate,
        [PermissionRequirement.of("report", "export")],
        backup="Ask an admin for export access.",
    )
    html = guard.render(export_button_html)
"""

from collections.abc import Sequence
from typing import Any

from warden.lifecycle import AccessGate
from warden.matching import PermissionRequirement


class PermissionGuard:
    """Choose between content and a backup based on ``check_requirements``.

    Like the gate itself, the guard is permissive before ``init()``.
    """

    __slots__ = ("_gate", "backup", "match_any", "requirements")

    def __init__(
        self,
        gate: AccessGate,
        requirements: Sequence[PermissionRequirement] = (),
        *,
        match_any: bool = False,
        backup: Any = None,
    ) -> None:
        self._gate = gate
        self.requirements = tuple(requirements)
        self.match_any = match_any
        self.backup = backup

    @property
    def allowed(self) -> bool:
        return self._gate.check_requirements(self.requirements, self.match_any)

    def render(self, content: Any) -> Any:
        """Return ``content`` if allowed, else ``backup`` (``None`` by default)."""
        if self.allowed:
            return content
        return self.backup
