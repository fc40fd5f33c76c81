"""Shared response parsing helpers for sync/async fetches."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from xml.etree import ElementTree

from .errors import Cov19DecodeError

logger = logging.getLogger("uk_covid19_client")

LAST_MODIFIED_HEADER = "Last-Modified"


def parse_json_payload(content: bytes, *, page: int | None = None) -> dict[str, object]:
    """Parse a JSON page body and map parse failures to domain errors."""

    try:
        payload = json.loads(content)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise Cov19DecodeError(
            "response body is not valid JSON",
            page=page,
            cause="json",
        ) from exc

    if not isinstance(payload, dict):
        raise Cov19DecodeError(
            "response JSON root must be an object",
            page=page,
            cause="json",
        )
    return payload


def parse_xml_document(content: bytes, *, page: int | None = None) -> ElementTree.Element:
    try:
        return ElementTree.fromstring(content)
    except ElementTree.ParseError as exc:
        raise Cov19DecodeError(
            "response body is not valid XML",
            page=page,
            cause="xml",
        ) from exc


def parse_http_datetime(value: str | None) -> datetime | None:
    """Parse an HTTP-date (RFC 1123) or ISO-8601 timestamp.

    Returns ``None`` for missing or unparseable input; naive values are taken as UTC.
    """

    if value is None:
        return None
    text = value.strip()
    if text == "":
        return None

    parsed: datetime | None
    try:
        parsed = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        parsed = None

    if parsed is None:
        iso_text = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
        try:
            parsed = datetime.fromisoformat(iso_text)
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def extract_last_modified(
    headers: Mapping[str, str],
    *,
    page: int | None = None,
) -> datetime | None:
    raw = headers.get(LAST_MODIFIED_HEADER)
    if raw is None:
        return None
    parsed = parse_http_datetime(raw)
    if parsed is None:
        logger.warning("unparseable Last-Modified header page=%s value=%r", page, raw)
    return parsed


def format_last_update(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


__all__ = [
    "LAST_MODIFIED_HEADER",
    "parse_json_payload",
    "parse_xml_document",
    "parse_http_datetime",
    "extract_last_modified",
    "format_last_update",
]
