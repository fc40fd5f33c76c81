"""Sync HTTP transport: one short-lived httpx client per fetch session."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Protocol

import httpx

from ..config import Cov19ClientConfig
from .errors import Cov19TransportError
from .models import RawResponse
from .transport_shared import build_default_headers, build_default_timeout, to_transport_error

logger = logging.getLogger("uk_covid19_client")


class SyncTransportClient(Protocol):
    def request(self, method: str, url: str) -> object: ...
    def close(self) -> None: ...


class SyncTransportSession:
    """Request surface handed to the fetch engine and probes."""

    def __init__(self, client: SyncTransportClient) -> None:
        self._client = client

    def get(self, url: str, *, page: int | None = None) -> RawResponse:
        return self._send("GET", url, page=page)

    def options(self, url: str) -> RawResponse:
        return self._send("OPTIONS", url, page=None)

    def _send(self, method: str, url: str, *, page: int | None) -> RawResponse:
        logger.debug("request start method=%s url=%s page=%s", method, url, page)
        try:
            response = self._client.request(method, url)
        except httpx.HTTPError as exc:
            raise to_transport_error(exc, method=method, url=url, page=page) from exc

        raw = RawResponse.from_response(response)
        logger.debug(
            "response received method=%s page=%s http_status=%s bytes=%s",
            method,
            page,
            raw.status_code,
            len(raw.content),
        )
        return raw


class SyncTransport:
    """Synchronous transport for the coronavirus dashboard API."""

    def __init__(
        self,
        config: Cov19ClientConfig,
        *,
        client_factory: Callable[[], SyncTransportClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or self._default_client
        self._closed = False

    def _default_client(self) -> httpx.Client:
        return httpx.Client(
            headers=build_default_headers(self._config),
            timeout=build_default_timeout(self._config),
        )

    @property
    def config(self) -> Cov19ClientConfig:
        return self._config

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True

    @contextmanager
    def session(self) -> Iterator[SyncTransportSession]:
        if self._closed:
            raise Cov19TransportError("transport is already closed")
        client = self._client_factory()
        try:
            yield SyncTransportSession(client)
        finally:
            client.close()


__all__ = [
    "SyncTransportClient",
    "SyncTransportSession",
    "SyncTransport",
]
