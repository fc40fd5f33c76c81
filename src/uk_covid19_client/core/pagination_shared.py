"""Shared page-walking helpers for sync/async fetch loops."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Protocol, TypeVar

from .errors import Cov19PageLimitError, upstream_error
from .models import RawResponse, ResponseFormat
from .response_parsing import extract_last_modified

logger = logging.getLogger("uk_covid19_client")

AccT = TypeVar("AccT")


class CancelSignal(Protocol):
    def is_set(self) -> bool: ...


class PageDecoder(Protocol[AccT]):
    """Merge strategy for one wire format."""

    @property
    def format(self) -> ResponseFormat: ...

    def empty(self) -> AccT: ...

    def merge(self, accumulator: AccT, content: bytes, *, page: int) -> AccT: ...

    def count(self, accumulator: AccT) -> int: ...


def build_page_url(base_url: str, *, page: int, response_format: ResponseFormat) -> str:
    return f"{base_url}&page={page}&format={response_format.value}"


def ensure_within_limit(page: int, *, max_pages: int) -> None:
    if page > max_pages:
        raise Cov19PageLimitError(
            "Exceeded pagination guardrail (max_pages)",
            page=page,
            cause="page_limit",
        )


def is_exhausted(response: RawResponse, *, page: int) -> bool:
    """Return True on the 204 end-of-data signal; raise on HTTP failure."""

    if response.is_no_content:
        logger.debug("pagination exhausted page=%s", page)
        return True
    if response.is_error:
        logger.error("page request failed page=%s http_status=%s", page, response.status_code)
        raise upstream_error(response.status_code, page=page)
    return False


def next_last_update(
    current: datetime | None,
    response: RawResponse,
    *,
    page: int,
) -> datetime | None:
    # Last write wins: any page that carries a usable header replaces the value.
    observed = extract_last_modified(response.headers, page=page)
    return observed if observed is not None else current


__all__ = [
    "CancelSignal",
    "PageDecoder",
    "build_page_url",
    "ensure_within_limit",
    "is_exhausted",
    "next_last_update",
]
