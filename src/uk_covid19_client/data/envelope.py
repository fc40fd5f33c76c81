"""Assemble fetch outcomes into caller-facing results."""

from __future__ import annotations

from datetime import datetime
from typing import TypeVar
from xml.etree import ElementTree

from ..core.models import FetchOutcome
from ..core.response_parsing import format_last_update
from .decoders import LENGTH_TAG, finalize_document
from .models import JsonResult, XmlResult

T = TypeVar("T")


def _resolve_last_update(
    outcome: FetchOutcome[object],
    fallback_last_update: datetime | None,
) -> datetime | None:
    return outcome.last_update if outcome.last_update is not None else fallback_last_update


def build_json_result(
    outcome: FetchOutcome[list[T]],
    *,
    fallback_last_update: datetime | None = None,
) -> JsonResult[T]:
    data = tuple(outcome.accumulator)
    return JsonResult(
        data=data,
        length=len(data),
        total_pages=outcome.total_pages,
        last_update=format_last_update(_resolve_last_update(outcome, fallback_last_update)),
    )


def build_xml_result(
    outcome: FetchOutcome[ElementTree.Element | None],
    *,
    fallback_last_update: datetime | None = None,
) -> XmlResult:
    last_update = _resolve_last_update(outcome, fallback_last_update)
    document = finalize_document(
        outcome.accumulator,
        total_pages=outcome.total_pages,
        last_update=last_update,
    )
    length_text = document.findtext(LENGTH_TAG) or "0"
    return XmlResult(
        document=document,
        length=int(length_text),
        total_pages=outcome.total_pages,
        last_update=format_last_update(last_update),
    )


__all__ = [
    "build_json_result",
    "build_xml_result",
]
