"""Gate configuration.

GateConfig is a frozen dataclass — immutable after creation, no
string-key dict lookups.
"""

from dataclasses import dataclass

from warden.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class GateConfig:
    """Gate configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = GateConfig(home_route="/home", denied_message="Nope")
    """

    # Back navigation falls back to this route when the provider fails
    home_route: str = "/pages/index/index"

    # Denial payload
    denied_code: int = 401
    denied_message: str = "Permission denied"

    # Emit allow/deny events through warden.audit
    audit: bool = True

    def __post_init__(self) -> None:
        if not self.home_route:
            msg = "GateConfig.home_route must be a non-empty route id."
            raise ConfigurationError(msg)
        if not 400 <= self.denied_code <= 499:
            msg = f"GateConfig.denied_code must be a 4xx code, got {self.denied_code}."
            raise ConfigurationError(msg)
