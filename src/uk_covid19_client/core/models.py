"""Core response models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Generic, TypeVar

import httpx

AccT = TypeVar("AccT")


class ResponseFormat(str, Enum):
    """Wire encoding requested through the ``format`` query parameter."""

    JSON = "json"
    XML = "xml"
    CSV = "csv"


@dataclass(slots=True, frozen=True)
class RawResponse:
    """One HTTP response as seen by the fetch engine."""

    status_code: int
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    content: bytes = b""

    @classmethod
    def from_response(cls, response: object) -> "RawResponse":
        raw_headers = getattr(response, "headers", None)
        headers = httpx.Headers(raw_headers if isinstance(raw_headers, Mapping) else None)
        return cls(
            status_code=int(getattr(response, "status_code")),
            headers=headers,
            content=bytes(getattr(response, "content", b"") or b""),
        )

    @property
    def is_no_content(self) -> bool:
        return self.status_code == 204

    @property
    def is_error(self) -> bool:
        return self.status_code >= 400


@dataclass(slots=True, frozen=True)
class FetchOutcome(Generic[AccT]):
    accumulator: AccT
    total_pages: int
    last_update: datetime | None


__all__ = [
    "ResponseFormat",
    "RawResponse",
    "FetchOutcome",
]
