"""Single-request metadata probes (headers and API description)."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from ..core.errors import Cov19DecodeError, upstream_error
from ..core.models import RawResponse
from ..core.response_parsing import parse_json_payload
from .models import ApiDescription

logger = logging.getLogger("uk_covid19_client")


class ProbeSession(Protocol):
    def get(self, url: str, *, page: int | None = None) -> RawResponse: ...
    def options(self, url: str) -> RawResponse: ...


class AsyncProbeSession(Protocol):
    async def get(self, url: str, *, page: int | None = None) -> RawResponse: ...
    async def options(self, url: str) -> RawResponse: ...


def _checked(response: RawResponse, *, probe: str) -> RawResponse:
    if response.is_error:
        logger.error("%s probe failed http_status=%s", probe, response.status_code)
        raise upstream_error(response.status_code)
    return response


def _describe(response: RawResponse) -> ApiDescription:
    try:
        payload = parse_json_payload(_checked(response, probe="options").content)
    except Cov19DecodeError:
        logger.error("options probe returned an unreadable API description")
        raise
    return ApiDescription.from_payload(payload)


def head_probe(session: ProbeSession, base_url: str) -> httpx.Headers:
    """GET the base query (no page/format) and return its headers."""

    return _checked(session.get(base_url), probe="head").headers


def capability_probe(session: ProbeSession, endpoint: str) -> ApiDescription:
    return _describe(session.options(endpoint))


async def ahead_probe(session: AsyncProbeSession, base_url: str) -> httpx.Headers:
    return _checked(await session.get(base_url), probe="head").headers


async def acapability_probe(session: AsyncProbeSession, endpoint: str) -> ApiDescription:
    return _describe(await session.options(endpoint))


__all__ = [
    "head_probe",
    "capability_probe",
    "ahead_probe",
    "acapability_probe",
]
