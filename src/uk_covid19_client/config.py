"""Client configuration."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_ENDPOINT = "https://api.coronavirus.data.gov.uk/v1/data"


@dataclass(slots=True, frozen=True)
class TransportConfig:
    """Transport-related settings."""

    timeout_seconds: float = 10.0

    def validate(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError("transport.timeout_seconds must be > 0")


@dataclass(slots=True, frozen=True)
class PaginationConfig:
    """Page walking guardrails."""

    max_pages: int = 10_000

    def validate(self) -> None:
        if not isinstance(self.max_pages, int) or isinstance(self.max_pages, bool):
            raise ValueError("pagination.max_pages must be int")
        if self.max_pages < 1:
            raise ValueError("pagination.max_pages must be >= 1")


@dataclass(slots=True, frozen=True)
class Cov19ClientConfig:
    """Runtime configuration for the coronavirus dashboard client."""

    endpoint: str = DEFAULT_ENDPOINT
    user_agent: str = "uk-covid19-client/0.1.0"

    transport: TransportConfig = field(default_factory=TransportConfig)
    pagination: PaginationConfig = field(default_factory=PaginationConfig)

    def validate(self) -> None:
        if not self.endpoint:
            raise ValueError("endpoint must not be empty")
        if not self.user_agent:
            raise ValueError("user_agent must not be empty")
        self.transport.validate()
        self.pagination.validate()


__all__ = [
    "DEFAULT_ENDPOINT",
    "TransportConfig",
    "PaginationConfig",
    "Cov19ClientConfig",
]
