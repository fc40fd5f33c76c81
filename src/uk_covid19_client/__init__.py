"""Public package exports for the UK coronavirus dashboard API client."""

from .async_client import AsyncCov19Client
from .client import Cov19Client
from .config import Cov19ClientConfig
from .data.queries import Cov19Query

__all__ = ["Cov19Client", "AsyncCov19Client", "Cov19ClientConfig", "Cov19Query"]
