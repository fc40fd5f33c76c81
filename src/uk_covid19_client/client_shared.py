"""Shared helpers for sync/async client bootstrap."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from datetime import datetime

from .config import Cov19ClientConfig
from .core.errors import Cov19ValidationError
from .core.response_parsing import extract_last_modified
from .data.queries import Cov19Query

logger = logging.getLogger("uk_covid19_client")


def validate_client_config(config: Cov19ClientConfig) -> None:
    try:
        config.validate()
    except ValueError as exc:
        raise Cov19ValidationError(str(exc)) from exc


def resolve_client_config(
    config: Cov19ClientConfig | None,
    transport_config: Cov19ClientConfig | None,
) -> Cov19ClientConfig:
    """Pick the config a client runs with.

    An injected transport carries its own config; an explicit ``config`` must
    agree with it on the endpoint.
    """

    if config is None:
        config = transport_config or Cov19ClientConfig()
    elif transport_config is not None and transport_config.endpoint != config.endpoint:
        raise Cov19ValidationError(
            f"config endpoint {config.endpoint!r} does not match transport endpoint "
            f"{transport_config.endpoint!r}"
        )
    validate_client_config(config)
    return config


def resolve_query(
    query: Cov19Query | None,
    *,
    filters: Mapping[str, str] | None,
    structure: Mapping[str, str] | None,
    latest_by: str | None,
) -> Cov19Query:
    if query is not None:
        if filters is not None or structure is not None or latest_by is not None:
            raise Cov19ValidationError("pass either query or filters/structure/latest_by, not both")
        return query
    return Cov19Query(filters=filters or {}, structure=structure or {}, latest_by=latest_by)


class LastUpdateCache:
    """The one piece of state a client shares across calls.

    Only a parsed ``Last-Modified`` value may overwrite it; ``None`` never does.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: datetime | None = None

    def get(self) -> datetime | None:
        with self._lock:
            return self._value

    def record(self, value: datetime | None) -> datetime | None:
        with self._lock:
            if value is not None:
                self._value = value
            return self._value

    def record_from_headers(self, headers: Mapping[str, str]) -> datetime | None:
        observed = extract_last_modified(headers)
        if observed is None:
            logger.info("last update unknown; Last-Modified missing or unparseable")
        return self.record(observed)


__all__ = [
    "validate_client_config",
    "resolve_client_config",
    "resolve_query",
    "LastUpdateCache",
]
