"""Async HTTP transport: one short-lived httpx client per fetch session."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Protocol

import httpx

from ..config import Cov19ClientConfig
from .errors import Cov19TransportError
from .models import RawResponse
from .transport_shared import build_default_headers, build_default_timeout, to_transport_error

logger = logging.getLogger("uk_covid19_client")


class AsyncTransportClient(Protocol):
    async def request(self, method: str, url: str) -> object: ...
    async def aclose(self) -> None: ...


class AsyncTransportSession:
    """Async request surface handed to the fetch engine and probes."""

    def __init__(self, client: AsyncTransportClient) -> None:
        self._client = client

    async def get(self, url: str, *, page: int | None = None) -> RawResponse:
        return await self._send("GET", url, page=page)

    async def options(self, url: str) -> RawResponse:
        return await self._send("OPTIONS", url, page=None)

    async def _send(self, method: str, url: str, *, page: int | None) -> RawResponse:
        logger.debug("request start method=%s url=%s page=%s", method, url, page)
        try:
            response = await self._client.request(method, url)
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


class AsyncTransport:
    """Asynchronous transport for the coronavirus dashboard API."""

    def __init__(
        self,
        config: Cov19ClientConfig,
        *,
        client_factory: Callable[[], AsyncTransportClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or self._default_client
        self._closed = False

    def _default_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=build_default_headers(self._config),
            timeout=build_default_timeout(self._config),
        )

    @property
    def config(self) -> Cov19ClientConfig:
        return self._config

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        self._closed = True

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncTransportSession]:
        if self._closed:
            raise Cov19TransportError("transport is already closed")
        client = self._client_factory()
        try:
            yield AsyncTransportSession(client)
        finally:
            await client.aclose()


__all__ = [
    "AsyncTransportClient",
    "AsyncTransportSession",
    "AsyncTransport",
]
