"""Warden exception hierarchy.

Shared across the matcher, authorizer, gate, and event bus so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class WardenError(Exception):
    """Base for all warden-specific errors."""


class ConfigurationError(WardenError):
    """Raised when gate configuration or a subscription is invalid."""


class UninitializedError(WardenError):
    """A deferred task ran but the gate has no authorizer.

    Only reachable if the authorizer is torn down after ``init()``,
    which the gate never does on its own.
    """


class InvalidStateError(WardenError):
    """A ``Deferred`` was settled twice or read before settling."""


class CallAborted(WardenError):  # noqa: N818
    """A queued or in-flight call was cancelled before it finished.

    Settles the call's ``Deferred`` so waiters are released; the
    cancellation itself is chained as ``__cause__``.
    """


@dataclass(frozen=True, slots=True)
class AuthorizationDenied(WardenError):  # noqa: N818
    """The target route's requirements are not satisfied.

    Raised only by the check-then-dispatch navigation paths. ``code``
    is fixed at 401 by default so callers can branch on it.
    """

    message: str = "Permission denied"
    code: int = 401
    target_id: str | None = None

    def __str__(self) -> str:
        if self.target_id:
            return f"{self.code}: {self.message} ({self.target_id})"
        return f"{self.code}: {self.message}"
