"""HTTP transport package.

Module split:
    - `base`: transport contract and response record.
    - `http`: blocking adapter on `requests`.
    - `async_http`: asyncio adapter on `httpx`.
    - `api`: bearer-authenticated REST helpers and CDN URL resolution.
"""

from inliner.transport.api import AsyncInlinerApi, InlinerApi
from inliner.transport.async_http import HttpxAsyncTransport
from inliner.transport.base import AsyncTransport, Transport, TransportResponse
from inliner.transport.http import RequestsTransport

__all__ = [
    "AsyncInlinerApi",
    "AsyncTransport",
    "HttpxAsyncTransport",
    "InlinerApi",
    "RequestsTransport",
    "Transport",
    "TransportResponse",
]
