"""Async paginated fetch engine driven by the server's 204 end-of-data signal."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Protocol, TypeVar

from .models import FetchOutcome, RawResponse
from .pagination_shared import (
    PageDecoder,
    build_page_url,
    ensure_within_limit,
    is_exhausted,
    next_last_update,
)

logger = logging.getLogger("uk_covid19_client")

AccT = TypeVar("AccT")


class AsyncPageSession(Protocol):
    async def get(self, url: str, *, page: int | None = None) -> RawResponse: ...


async def afetch_pages(
    session: AsyncPageSession,
    base_url: str,
    decoder: PageDecoder[AccT],
    *,
    max_pages: int = 10_000,
) -> FetchOutcome[AccT]:
    """Async variant of ``fetch_pages``.

    Cancellation is the task's own: ``asyncio.CancelledError`` raised while a
    page is in flight propagates before that page is merged.
    """

    accumulator = decoder.empty()
    last_update: datetime | None = None
    page = 1

    while True:
        url = build_page_url(base_url, page=page, response_format=decoder.format)
        response = await session.get(url, page=page)

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
    "AsyncPageSession",
    "afetch_pages",
]
