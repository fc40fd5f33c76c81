"""Per-format page decoders and their merge strategies."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, Generic, TypeVar
from xml.etree import ElementTree

from ..core.errors import Cov19DecodeError, Cov19ValidationError
from ..core.models import ResponseFormat
from ..core.response_parsing import format_last_update, parse_json_payload, parse_xml_document
from .records import record_factory

logger = logging.getLogger("uk_covid19_client")

T = TypeVar("T")

DATA_TAG = "data"
LENGTH_TAG = "length"
TOTAL_PAGES_TAG = "totalPages"
LAST_UPDATE_TAG = "lastUpdate"
PAGE_SCOPED_TAGS: tuple[str, ...] = ("pagination", "maxPageLimit")


def _decode_failure(message: str, *, page: int, response_format: ResponseFormat) -> Cov19DecodeError:
    logger.error("page decode failed format=%s page=%s reason=%s", response_format.value, page, message)
    return Cov19DecodeError(message, page=page, cause=response_format.value)


class JsonRecordDecoder(Generic[T]):
    """Decode ``data`` items into records and append them page after page."""

    format = ResponseFormat.JSON

    def __init__(self, factory: Callable[[Mapping[str, Any]], T]) -> None:
        self._factory = factory

    def empty(self) -> list[T]:
        return []

    def decode(self, content: bytes, *, page: int) -> list[T]:
        try:
            payload = parse_json_payload(content, page=page)
        except Cov19DecodeError as exc:
            raise _decode_failure(str(exc), page=page, response_format=self.format) from exc

        items = payload.get(DATA_TAG)
        if not isinstance(items, list):
            raise _decode_failure(
                "response JSON has no 'data' list",
                page=page,
                response_format=self.format,
            )

        records: list[T] = []
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                raise _decode_failure(
                    f"data[{index}] must be an object",
                    page=page,
                    response_format=self.format,
                )
            try:
                records.append(self._factory(item))
            except (TypeError, ValueError, LookupError, AttributeError) as exc:
                raise _decode_failure(
                    f"data[{index}] does not match record type: {exc}",
                    page=page,
                    response_format=self.format,
                ) from exc
        return records

    def merge(self, accumulator: list[T], content: bytes, *, page: int) -> list[T]:
        accumulator.extend(self.decode(content, page=page))
        return accumulator

    def count(self, accumulator: list[T]) -> int:
        return len(accumulator)


class XmlDocumentDecoder:
    """Keep the first page's document and graft later pages' ``data`` onto it."""

    format = ResponseFormat.XML

    def empty(self) -> ElementTree.Element | None:
        return None

    def decode(self, content: bytes, *, page: int) -> ElementTree.Element:
        try:
            root = parse_xml_document(content, page=page)
        except Cov19DecodeError as exc:
            raise _decode_failure(str(exc), page=page, response_format=self.format) from exc
        if root.find(DATA_TAG) is None:
            raise _decode_failure(
                "response XML has no 'data' section",
                page=page,
                response_format=self.format,
            )
        return root

    def merge(
        self,
        accumulator: ElementTree.Element | None,
        content: bytes,
        *,
        page: int,
    ) -> ElementTree.Element:
        root = self.decode(content, page=page)
        if accumulator is None:
            return root
        accumulator.extend(root.findall(DATA_TAG))
        return accumulator

    def count(self, accumulator: ElementTree.Element | None) -> int:
        if accumulator is None:
            return 0
        return len(accumulator.findall(DATA_TAG))


def _remove_descendants(parent: ElementTree.Element, tags: tuple[str, ...]) -> None:
    for child in list(parent):
        if child.tag in tags:
            parent.remove(child)
            continue
        _remove_descendants(child, tags)


def finalize_document(
    root: ElementTree.Element | None,
    *,
    total_pages: int,
    last_update: datetime | None,
) -> ElementTree.Element:
    """Rewrite page-level metadata once all pages are merged."""

    if root is None:
        root = ElementTree.Element("document")

    _remove_descendants(root, PAGE_SCOPED_TAGS)
    for tag in (TOTAL_PAGES_TAG, LAST_UPDATE_TAG):
        for stale in root.findall(tag):
            root.remove(stale)

    length = root.find(LENGTH_TAG)
    if length is None:
        length = ElementTree.Element(LENGTH_TAG)
        root.insert(0, length)
    length.text = str(len(root.findall(DATA_TAG)))

    ElementTree.SubElement(root, TOTAL_PAGES_TAG).text = str(total_pages)
    ElementTree.SubElement(root, LAST_UPDATE_TAG).text = format_last_update(last_update) or ""
    return root


def decoder_for(
    response_format: ResponseFormat,
    *,
    record_type: type[T] | Callable[..., T] | None = None,
) -> JsonRecordDecoder[Any] | XmlDocumentDecoder:
    if response_format is ResponseFormat.JSON:
        return JsonRecordDecoder(record_factory(record_type))
    if response_format is ResponseFormat.XML:
        return XmlDocumentDecoder()
    raise Cov19ValidationError(f"format {response_format.value!r} is not decoded by this client")


__all__ = [
    "JsonRecordDecoder",
    "XmlDocumentDecoder",
    "finalize_document",
    "decoder_for",
]
