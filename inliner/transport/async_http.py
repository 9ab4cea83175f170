"""Asyncio HTTP transport built on `httpx`.

Concurrency model:
    One `httpx.AsyncClient` is shared by every job running on the event loop.
    Awaiting a response suspends only the calling task, so independent polls can
    progress concurrently under `asyncio.gather`.

Error handling strategy:
    Mirrors `inliner.transport.http`: `httpx.RequestError` and rejected statuses
    become `TransportError`.
"""

from __future__ import annotations

from typing import Any

import httpx

from inliner.config import DEFAULT_TIMEOUT_SECONDS
from inliner.errors import TransportError
from inliner.transport.base import TransportResponse, error_message


class HttpxAsyncTransport:
    """`AsyncTransport` implementation backed by `httpx.AsyncClient`."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.timeout = timeout
        self.client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

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
        """Send one HTTP request; see `RequestsTransport.request` for arguments."""
        try:
            response = await self.client.request(
                method,
                url,
                headers=headers,
                params=params,
                json=json_body,
                files=files,
                data=data,
                timeout=self.timeout,
            )
        except httpx.RequestError as exc:
            raise TransportError(f"Inliner API error: {exc}") from exc

        body = response.content or b""
        if raise_for_status and not response.is_success:
            raise TransportError(
                error_message(
                    response.status_code,
                    body,
                    f"HTTP {response.status_code} for {method} {url}",
                ),
                status_code=response.status_code,
            )

        return TransportResponse(
            status=response.status_code,
            body=body,
            headers=dict(response.headers),
        )

    async def aclose(self) -> None:
        await self.client.aclose()
