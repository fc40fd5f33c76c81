"""Error types and status mapping."""

from __future__ import annotations

from http import HTTPStatus


def describe_status(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Unknown Status"


class Cov19ApiError(Exception):
    """Base exception for this package."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        page: int | None = None,
        cause: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.page = page
        self.cause = cause


class Cov19TransportError(Cov19ApiError):
    """Network/transport-level failure."""


class Cov19ClientClosedError(Cov19ApiError):
    """Raised when client is used after close."""


class Cov19ValidationError(Cov19ApiError):
    """Invalid configuration or unsupported request."""


class Cov19UpstreamError(Cov19ApiError):
    """HTTP error status returned by the API (>= 400)."""


class Cov19DecodeError(Cov19ApiError):
    """Page body is malformed or does not match the expected shape."""


class Cov19CancelledError(Cov19ApiError):
    """Fetch aborted by the caller's cancel signal."""


class Cov19PageLimitError(Cov19ApiError):
    """Server kept returning pages past the configured guardrail."""


def upstream_error(status_code: int, *, page: int | None = None) -> Cov19UpstreamError:
    """Build the domain error for an HTTP failure status."""

    where = f" (page {page})" if page is not None else ""
    return Cov19UpstreamError(
        f"API responded {status_code} {describe_status(status_code)}{where}",
        status_code=status_code,
        page=page,
        cause="server" if status_code >= 500 else "client",
    )


__all__ = [
    "Cov19ApiError",
    "Cov19TransportError",
    "Cov19ClientClosedError",
    "Cov19ValidationError",
    "Cov19UpstreamError",
    "Cov19DecodeError",
    "Cov19CancelledError",
    "Cov19PageLimitError",
    "describe_status",
    "upstream_error",
]
