"""Public async client entrypoint."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from types import TracebackType
from typing import Any, TypeVar

import httpx

from .client_shared import LastUpdateCache, resolve_client_config, resolve_query
from .config import Cov19ClientConfig
from .core.async_pagination import afetch_pages
from .core.async_transport import AsyncTransport
from .core.errors import Cov19ClientClosedError
from .core.models import ResponseFormat
from .data.decoders import decoder_for
from .data.envelope import build_json_result, build_xml_result
from .data.models import ApiDescription, JsonResult, XmlResult
from .data.params import build_query_url
from .data.probes import acapability_probe, ahead_probe
from .data.queries import Cov19Query

T = TypeVar("T")


class AsyncCov19Client:
    """Public async coronavirus dashboard API client.

    Cancel a fetch by cancelling the awaiting task; the in-flight page is
    dropped and the per-call connection is closed.
    """

    def __init__(
        self,
        query: Cov19Query | None = None,
        *,
        filters: Mapping[str, str] | None = None,
        structure: Mapping[str, str] | None = None,
        latest_by: str | None = None,
        config: Cov19ClientConfig | None = None,
        transport: AsyncTransport | None = None,
    ) -> None:
        self._config = resolve_client_config(
            config,
            transport.config if transport is not None else None,
        )

        self._query = resolve_query(
            query,
            filters=filters,
            structure=structure,
            latest_by=latest_by,
        )
        self._base_url = build_query_url(self._config.endpoint, self._query)
        self._transport = transport or AsyncTransport(self._config)
        self._last_update = LastUpdateCache()
        self._closed = False

    @property
    def query(self) -> Cov19Query:
        return self._query

    @property
    def base_url(self) -> str:
        return self._base_url

    def _ensure_open(self) -> None:
        if self._closed:
            raise Cov19ClientClosedError("AsyncCov19Client is already closed")

    async def get(
        self,
        record_type: type[T] | Callable[..., T] | None = None,
    ) -> JsonResult[Any]:
        self._ensure_open()
        decoder = decoder_for(ResponseFormat.JSON, record_type=record_type)
        async with self._transport.session() as session:
            outcome = await afetch_pages(
                session,
                self._base_url,
                decoder,
                max_pages=self._config.pagination.max_pages,
            )
        fallback = self._last_update.record(outcome.last_update)
        return build_json_result(outcome, fallback_last_update=fallback)

    async def get_xml(self) -> XmlResult:
        self._ensure_open()
        decoder = decoder_for(ResponseFormat.XML)
        async with self._transport.session() as session:
            outcome = await afetch_pages(
                session,
                self._base_url,
                decoder,
                max_pages=self._config.pagination.max_pages,
            )
        fallback = self._last_update.record(outcome.last_update)
        return build_xml_result(outcome, fallback_last_update=fallback)

    async def head(self) -> httpx.Headers:
        self._ensure_open()
        async with self._transport.session() as session:
            return await ahead_probe(session, self._base_url)

    async def options(self) -> ApiDescription:
        self._ensure_open()
        async with self._transport.session() as session:
            return await acapability_probe(session, self._config.endpoint)

    async def last_update(self) -> datetime | None:
        self._ensure_open()
        cached = self._last_update.get()
        if cached is not None:
            return cached
        return self._last_update.record_from_headers(await self.head())

    async def close(self) -> None:
        if self._closed:
            return
        await self._transport.close()
        self._closed = True

    async def __aenter__(self) -> "AsyncCov19Client":
        self._ensure_open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        await self.close()
        return False


__all__ = [
    "AsyncCov19Client",
]
