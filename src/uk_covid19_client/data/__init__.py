"""Query, decoding and result models for the data endpoint."""

from .models import ApiDescription, JsonResult, XmlResult
from .params import render_query
from .queries import Cov19Query

__all__ = [
    "Cov19Query",
    "render_query",
    "JsonResult",
    "XmlResult",
    "ApiDescription",
]
