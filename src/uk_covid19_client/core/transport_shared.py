"""Shared helpers for sync/async transport implementations."""

from __future__ import annotations

import logging
from collections.abc import Mapping

import httpx

from ..config import Cov19ClientConfig
from .errors import Cov19TransportError

logger = logging.getLogger("uk_covid19_client")


def build_default_headers(config: Cov19ClientConfig) -> Mapping[str, str]:
    return {
        "Accept-Encoding": "gzip, deflate",
        "User-Agent": config.user_agent,
    }


def build_default_timeout(config: Cov19ClientConfig) -> httpx.Timeout:
    # Applied to each request, never to a whole multi-page fetch.
    return httpx.Timeout(config.transport.timeout_seconds)


def to_transport_error(
    exc: Exception,
    *,
    method: str,
    url: str,
    page: int | None,
) -> Cov19TransportError:
    logger.error(
        "request network error method=%s url=%s page=%s error=%s",
        method,
        url,
        page,
        exc.__class__.__name__,
    )
    cause = "timeout" if isinstance(exc, httpx.TimeoutException) else "network"
    return Cov19TransportError(
        "network/transport error",
        page=page,
        cause=cause,
    )


__all__ = [
    "build_default_headers",
    "build_default_timeout",
    "to_transport_error",
]
