"""Query-string rendering for the data endpoint."""

from __future__ import annotations

import json
from collections.abc import Mapping

from .queries import Cov19Query


def render_filters(filters: Mapping[str, str]) -> str:
    return ";".join(f"{key}={value}" for key, value in filters.items())


def render_structure(structure: Mapping[str, str]) -> str:
    return json.dumps(dict(structure), separators=(",", ":"), ensure_ascii=False)


def render_query(query: Cov19Query) -> str:
    """Render ``?filters=..&structure=..&latestby=..`` without escaping.

    Values are expected to be query-safe already; the HTTP layer applies its
    usual percent-encoding when the URL is sent.
    """

    return (
        f"?filters={render_filters(query.filters)}"
        f"&structure={render_structure(query.structure)}"
        f"&latestby={query.latest_by or ''}"
    )


def build_query_url(endpoint: str, query: Cov19Query) -> str:
    return endpoint + render_query(query)


__all__ = [
    "render_filters",
    "render_structure",
    "render_query",
    "build_query_url",
]
