"""Public client entrypoint."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from types import TracebackType
from typing import Any, TypeVar

import httpx

from .client_shared import LastUpdateCache, resolve_client_config, resolve_query
from .config import Cov19ClientConfig
from .core.errors import Cov19ClientClosedError
from .core.models import ResponseFormat
from .core.pagination import fetch_pages
from .core.pagination_shared import CancelSignal
from .core.transport import SyncTransport
from .data.decoders import decoder_for
from .data.envelope import build_json_result, build_xml_result
from .data.models import ApiDescription, JsonResult, XmlResult
from .data.params import build_query_url
from .data.probes import capability_probe, head_probe
from .data.queries import Cov19Query

T = TypeVar("T")


class Cov19Client:
    """Public coronavirus dashboard API client.

    A client is bound to one query. Every call opens and closes its own HTTP
    connection; the only state kept between calls is the last known
    ``Last-Modified`` timestamp.
    """

    def __init__(
        self,
        query: Cov19Query | None = None,
        *,
        filters: Mapping[str, str] | None = None,
        structure: Mapping[str, str] | None = None,
        latest_by: str | None = None,
        config: Cov19ClientConfig | None = None,
        transport: SyncTransport | None = None,
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
        self._transport = transport or SyncTransport(self._config)
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
            raise Cov19ClientClosedError("Cov19Client is already closed")

    def get(
        self,
        record_type: type[T] | Callable[..., T] | None = None,
        *,
        cancel_event: CancelSignal | None = None,
    ) -> JsonResult[Any]:
        """Fetch every JSON page and decode ``data`` items into ``record_type``."""

        self._ensure_open()
        decoder = decoder_for(ResponseFormat.JSON, record_type=record_type)
        with self._transport.session() as session:
            outcome = fetch_pages(
                session,
                self._base_url,
                decoder,
                max_pages=self._config.pagination.max_pages,
                cancel_event=cancel_event,
            )
        fallback = self._last_update.record(outcome.last_update)
        return build_json_result(outcome, fallback_last_update=fallback)

    def get_xml(self, *, cancel_event: CancelSignal | None = None) -> XmlResult:
        """Fetch every XML page and merge them into one document."""

        self._ensure_open()
        decoder = decoder_for(ResponseFormat.XML)
        with self._transport.session() as session:
            outcome = fetch_pages(
                session,
                self._base_url,
                decoder,
                max_pages=self._config.pagination.max_pages,
                cancel_event=cancel_event,
            )
        fallback = self._last_update.record(outcome.last_update)
        return build_xml_result(outcome, fallback_last_update=fallback)

    def head(self) -> httpx.Headers:
        self._ensure_open()
        with self._transport.session() as session:
            return head_probe(session, self._base_url)

    def options(self) -> ApiDescription:
        self._ensure_open()
        with self._transport.session() as session:
            return capability_probe(session, self._config.endpoint)

    def last_update(self) -> datetime | None:
        """Return the cached timestamp, probing headers only when none is known."""

        self._ensure_open()
        cached = self._last_update.get()
        if cached is not None:
            return cached
        return self._last_update.record_from_headers(self.head())

    def close(self) -> None:
        if self._closed:
            return
        self._transport.close()
        self._closed = True

    def __enter__(self) -> "Cov19Client":
        self._ensure_open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        self.close()
        return False


__all__ = [
    "Cov19Client",
]
