"""Tests for warden.config and warden.errors."""

import pytest

from warden.config import GateConfig
from warden.errors import AuthorizationDenied, ConfigurationError, WardenError


class TestGateConfig:
    def test_defaults(self) -> None:
        config = GateConfig()
        assert config.home_route == "/pages/index/index"
        assert config.denied_code == 401
        assert config.denied_message == "Permission denied"
        assert config.audit is True

    def test_frozen(self) -> None:
        config = GateConfig()
        with pytest.raises(AttributeError):
            config.home_route = "/x"  # type: ignore[misc]

    def test_empty_home_route_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="home_route"):
            GateConfig(home_route="")

    @pytest.mark.parametrize("code", [200, 302, 500])
    def test_denied_code_must_be_4xx(self, code: int) -> None:
        with pytest.raises(ConfigurationError, match="4xx"):
            GateConfig(denied_code=code)


class TestAuthorizationDenied:
    def test_defaults(self) -> None:
        error = AuthorizationDenied()
        assert error.code == 401
        assert isinstance(error, WardenError)

    def test_str(self) -> None:
        assert str(AuthorizationDenied("Nope")) == "401: Nope"
        assert str(AuthorizationDenied("Nope", target_id="/a")) == "401: Nope (/a)"

    def test_raisable(self) -> None:
        with pytest.raises(AuthorizationDenied) as exc_info:
            raise AuthorizationDenied("Nope", code=403)
        assert exc_info.value.code == 403
