"""Paginated fetch engine driven by the server's 204 end-of-data signal."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Protocol, TypeVar

from .errors import Cov19CancelledError
from .models import FetchOutcome, RawResponse
from .pagination_shared import (
    CancelSignal,
    PageDecoder,
    build_page_url,
    ensure_within_limit,
    is_exhausted,
    next_last_update,
)

logger = logging.getLogger("uk_covid19_client")

AccT = TypeVar("AccT")


class PageSession(Protocol):
    def get(self, url: str, *, page: int | None = None) -> RawResponse: ...


def _raise_if_cancelled(cancel_event: CancelSignal | None, *, page: int) -> None:
    if cancel_event is not None and cancel_event.is_set():
        logger.info("fetch cancelled page=%s", page)
        raise Cov19CancelledError("fetch cancelled by caller", page=page, cause="cancelled")


def fetch_pages(
    session: PageSession,
    base_url: str,
    decoder: PageDecoder[AccT],
    *,
    max_pages: int = 10_000,
    cancel_event: CancelSignal | None = None,
) -> FetchOutcome[AccT]:
    """Walk pages 1, 2, ... until the API answers 204 and merge every page.

    Any upstream, transport or decode failure aborts the whole fetch; nothing
    collected so far is returned.
    """

    accumulator = decoder.empty()
    last_update: datetime | None = None
    page = 1

    while True:
        _raise_if_cancelled(cancel_event, page=page)
        url = build_page_url(base_url, page=page, response_format=decoder.format)
        response = session.get(url, page=page)
        _raise_if_cancelled(cancel_event, page=page)

        if is_exhausted(response, page=page):
            break
        ensure_within_limit(page, max_pages=max_pages)

        last_update = next_last_update(last_update, response, page=page)
        accumulator = decoder.merge(accumulator, response.content, page=page)
        page += 1

    total_pages = page - 1
    logger.info(
        "fetch complete format=%s total_pages=%s items=%s",
        decoder.format.value,
        total_pages,
        decoder.count(accumulator),
    )
    return FetchOutcome(
        accumulator=accumulator,
        total_pages=total_pages,
        last_update=last_update,
    )


__all__ = [
    "PageSession",
    "fetch_pages",
]
