"""Result and metadata models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Generic, TypeVar
from xml.etree import ElementTree

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class JsonResult(Generic[T]):
    data: tuple[T, ...] | list[T]
    length: int
    total_pages: int
    last_update: str | None

    def __post_init__(self) -> None:
        if isinstance(self.data, tuple):
            return
        object.__setattr__(self, "data", tuple(self.data))


@dataclass(slots=True, frozen=True)
class XmlResult:
    document: ElementTree.Element
    length: int
    total_pages: int
    last_update: str | None

    def to_string(self) -> str:
        return ElementTree.tostring(self.document, encoding="unicode")


@dataclass(slots=True, frozen=True)
class ApiDescription:
    """Subset of the OpenAPI document returned by ``OPTIONS``."""

    openapi: str | None
    title: str | None
    version: str | None
    servers: tuple[str, ...] = ()
    paths: tuple[str, ...] = ()
    raw: Mapping[str, object] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "ApiDescription":
        info = payload.get("info")
        info = info if isinstance(info, Mapping) else {}
        servers = payload.get("servers")
        paths = payload.get("paths")
        return cls(
            openapi=_text(payload.get("openapi") or payload.get("swagger")),
            title=_text(info.get("title")),
            version=_text(info.get("version")),
            servers=tuple(
                str(server["url"])
                for server in (servers if isinstance(servers, list) else [])
                if isinstance(server, Mapping) and server.get("url") is not None
            ),
            paths=tuple(str(path) for path in paths) if isinstance(paths, Mapping) else (),
            raw=payload,
        )


def _text(value: object) -> str | None:
    return str(value) if value is not None else None


__all__ = [
    "JsonResult",
    "XmlResult",
    "ApiDescription",
]
