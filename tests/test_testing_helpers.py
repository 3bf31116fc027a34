"""Tests for warden.testing helpers."""

import pytest

from warden.errors import AuthorizationDenied
from warden.navigation import NavigationProvider
from warden.routes import BackOptions, NavigateOptions
from warden.testing import FakeNavigator, assert_denied, assert_navigated, assert_not_navigated


class TestFakeNavigator:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(FakeNavigator(), NavigationProvider)

    @pytest.mark.anyio
    async def test_records_calls(self) -> None:
        nav = FakeNavigator()
        await nav.forward(NavigateOptions("/a"))
        await nav.back(BackOptions())
        assert [c.kind for c in nav.calls] == ["forward", "back"]
        assert nav.targets() == ["/a", None]
        assert nav.targets("forward") == ["/a"]

    @pytest.mark.anyio
    async def test_configured_failure(self) -> None:
        nav = FakeNavigator(failures={"replace"}, error=OSError("offline"))
        with pytest.raises(OSError, match="offline"):
            await nav.replace(NavigateOptions("/a"))
        assert nav.targets("replace") == ["/a"]


class TestAssertions:
    @pytest.mark.anyio
    async def test_assert_navigated(self) -> None:
        nav = FakeNavigator()
        await nav.switch_tab(NavigateOptions("/home"))
        assert_navigated(nav, "switch_tab", "/home")
        assert_not_navigated(nav, "/other")
        with pytest.raises(AssertionError, match="Expected forward navigation"):
            assert_navigated(nav, "forward", "/home")

    def test_assert_denied(self) -> None:
        assert_denied(AuthorizationDenied())
        with pytest.raises(AssertionError, match="Expected AuthorizationDenied"):
            assert_denied(RuntimeError())
        with pytest.raises(AssertionError, match="code 401"):
            assert_denied(AuthorizationDenied(code=403))
