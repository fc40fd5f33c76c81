"""Query models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


def _frozen_str_mapping(value: Mapping[str, str] | None, *, name: str) -> Mapping[str, str]:
    if value is None:
        return MappingProxyType({})
    if not isinstance(value, Mapping):
        raise TypeError(f"{name} must be Mapping[str, str]")
    normalized: dict[str, str] = {}
    for key, item in value.items():
        if not isinstance(key, str) or not isinstance(item, str):
            raise TypeError(f"{name} keys and values must be str")
        normalized[key] = item
    return MappingProxyType(normalized)


@dataclass(slots=True, frozen=True)
class Cov19Query:
    """Filters, output structure and optional ``latestBy`` metric.

    Iteration order of both mappings is preserved; it drives the rendered
    query string.
    """

    filters: Mapping[str, str] = field(default_factory=dict)
    structure: Mapping[str, str] = field(default_factory=dict)
    latest_by: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "filters", _frozen_str_mapping(self.filters, name="filters"))
        object.__setattr__(
            self,
            "structure",
            _frozen_str_mapping(self.structure, name="structure"),
        )
        if self.latest_by is not None and not isinstance(self.latest_by, str):
            raise TypeError("latest_by must be str | None")


__all__ = [
    "Cov19Query",
]
