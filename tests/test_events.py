"""Tests for warden.events — the gate's lifecycle notification bus."""

import logging

import pytest

from warden.errors import ConfigurationError
from warden.events import EVENT_NAMES, INITIALIZED, PERMISSIONS_UPDATED, GateEventBus


class TestGateEventBus:
    def test_event_names(self) -> None:
        assert EVENT_NAMES == {"initialized", "permissionsUpdated"}

    def test_multicast(self) -> None:
        bus = GateEventBus()
        seen: list[str] = []
        bus.on(INITIALIZED, lambda: seen.append("a"))
        bus.on(INITIALIZED, lambda: seen.append("b"))
        bus.emit(INITIALIZED)
        assert seen == ["a", "b"]

    def test_events_are_independent(self) -> None:
        bus = GateEventBus()
        seen: list[str] = []
        bus.on(INITIALIZED, lambda: seen.append("init"))
        bus.emit(PERMISSIONS_UPDATED)
        assert seen == []

    def test_unsubscribe_is_per_listener(self) -> None:
        bus = GateEventBus()
        seen: list[str] = []

        def first() -> None:
            seen.append("first")

        def second() -> None:
            seen.append("second")

        unsubscribe = bus.on(PERMISSIONS_UPDATED, first)
        bus.on(PERMISSIONS_UPDATED, second)
        unsubscribe()
        bus.emit(PERMISSIONS_UPDATED)
        assert seen == ["second"]

    def test_off_unknown_listener_is_ignored(self) -> None:
        bus = GateEventBus()
        bus.off(INITIALIZED, lambda: None)
        assert bus.listener_count(INITIALIZED) == 0

    def test_same_listener_on_both_events(self) -> None:
        bus = GateEventBus()
        calls: list[int] = []

        def listener() -> None:
            calls.append(1)

        bus.on(INITIALIZED, listener)
        bus.on(PERMISSIONS_UPDATED, listener)
        bus.off(INITIALIZED, listener)
        bus.emit(INITIALIZED)
        bus.emit(PERMISSIONS_UPDATED)
        assert calls == [1]

    def test_failing_listener_does_not_stop_delivery(self, caplog) -> None:
        bus = GateEventBus()
        seen: list[str] = []

        def broken() -> None:
            raise RuntimeError("listener bug")

        bus.on(INITIALIZED, broken)
        bus.on(INITIALIZED, lambda: seen.append("ok"))
        with caplog.at_level(logging.ERROR, logger="warden.events"):
            bus.emit(INITIALIZED)
        assert seen == ["ok"]
        assert "listener bug" in caplog.text

    def test_listener_may_unsubscribe_during_emit(self) -> None:
        bus = GateEventBus()
        seen: list[str] = []
        unsubscribe = None

        def once() -> None:
            seen.append("once")
            assert unsubscribe is not None
            unsubscribe()

        unsubscribe = bus.on(INITIALIZED, once)
        bus.emit(INITIALIZED)
        bus.emit(INITIALIZED)
        assert seen == ["once"]

    def test_unknown_event_rejected(self) -> None:
        bus = GateEventBus()
        with pytest.raises(ConfigurationError, match="Unknown gate event"):
            bus.on("app:init", lambda: None)
        with pytest.raises(ConfigurationError):
            bus.emit("nope")

    def test_async_listener_rejected(self) -> None:
        bus = GateEventBus()

        async def refresh() -> None:
            pass

        with pytest.raises(ConfigurationError, match="async"):
            bus.on(INITIALIZED, refresh)

    def test_clear(self) -> None:
        bus = GateEventBus()
        bus.on(INITIALIZED, lambda: None)
        bus.on(PERMISSIONS_UPDATED, lambda: None)
        bus.clear()
        assert bus.listener_count(INITIALIZED) == 0
        assert bus.listener_count(PERMISSIONS_UPDATED) == 0
