"""Shared fixtures for warden tests."""

import re

import pytest

from warden.audit import SecurityEvent, set_security_event_sink
from warden.lifecycle import AccessGate
from warden.matching import PermissionRequirement
from warden.routes import RouteSpec
from warden.testing import FakeNavigator


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def navigator() -> FakeNavigator:
    return FakeNavigator()


@pytest.fixture
def gate(navigator: FakeNavigator) -> AccessGate:
    return AccessGate(navigator)


@pytest.fixture
def routes() -> list[RouteSpec]:
    return [
        RouteSpec("/a", (PermissionRequirement.of("article", "read"),)),
        RouteSpec(
            "/b",
            (PermissionRequirement.of(re.compile(r"^sys:.+$"), "manage"),),
            match_any=True,
        ),
        RouteSpec("/c", (PermissionRequirement.of("c", "go"),)),
        RouteSpec("/d", (PermissionRequirement.of("product", "read"),)),
    ]


@pytest.fixture
def audit_events():
    """Collect security events for the duration of a test."""
    events: list[SecurityEvent] = []
    set_security_event_sink(events.append)
    try:
        yield events
    finally:
        set_security_event_sink(None)
