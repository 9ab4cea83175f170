"""Transport contract shared by the blocking and asyncio HTTP adapters.

Architectural role:
    The polling and orchestration layers only depend on the narrow capability
    defined here: send one request, get back status and body. Connection pooling,
    TLS and per-call socket timeouts belong to the concrete adapters.

Error contract:
    Implementations raise `TransportError` on network failure and, unless the
    caller passes `raise_for_status=False`, on any non-2xx status. The server's
    JSON `message` field is preferred for the error text when present.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True)
class TransportResponse:
    """Status, raw body and headers of a completed HTTP call."""

    status: int
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)


class Transport(Protocol):
    def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        params: Any = None,
        json_body: Any = None,
        files: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        raise_for_status: bool = True,
    ) -> TransportResponse:
        ...


class AsyncTransport(Protocol):
    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        params: Any = None,
        json_body: Any = None,
        files: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        raise_for_status: bool = True,
    ) -> TransportResponse:
        ...


def error_message(status: int, body: bytes, fallback: str) -> str:
    """Build the `TransportError` text for a failed response.

    Uses the body's JSON `message` field when available, otherwise `fallback`.
    """
    message = fallback
    try:
        payload = json.loads(body.decode("utf-8")) if body else None
    except (UnicodeDecodeError, json.JSONDecodeError):
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        message = str(payload["message"])
    return f"Inliner API error: {message}"
