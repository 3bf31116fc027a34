"""Security audit events.

Small opt-in event channel for authorization telemetry. Applications
can register a sink to forward events to logs, metrics, or SIEM.

Event names emitted by warden:

- ``gate.initialized`` — an authorizer was installed
- ``gate.permissions_updated`` — granted permissions were replaced
- ``navigation.denied`` — a guarded navigation was refused
- ``navigation.fallback`` — back navigation failed and went home
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from time import time
from typing import Any, TypeAlias

_log = logging.getLogger("warden.audit")


@dataclass(frozen=True, slots=True)
class SecurityEvent:
    """A structured security event."""

    name: str
    timestamp: float = field(default_factory=time)
    target_id: str | None = None
    kind: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


SecurityEventSink: TypeAlias = Callable[[SecurityEvent], None]


_sink_lock = threading.Lock()
_sink: SecurityEventSink | None = None


def set_security_event_sink(sink: SecurityEventSink | None) -> None:
    """Set a process-wide sink for security events.

    Pass ``None`` to disable event delivery.
    """
    global _sink
    with _sink_lock:
        _sink = sink


def emit_security_event(
    name: str,
    *,
    target_id: str | None = None,
    kind: str | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """Emit a best-effort security event to the configured sink."""
    with _sink_lock:
        sink = _sink
    if sink is None:
        return

    event = SecurityEvent(
        name=name,
        target_id=target_id,
        kind=kind,
        details=details or {},
    )
    try:
        sink(event)
    except Exception:
        _log.exception("Security event sink failed for %r", name)
