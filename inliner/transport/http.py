"""Blocking HTTP transport built on `requests`.

Processing flow:
    1. Reuse one `requests.Session` for connection pooling.
    2. Submit the request with the configured per-call timeout.
    3. Return status/body, or raise `TransportError` on failure.

Thread safety:
    A single instance is shared by concurrent jobs. No per-job state is kept on
    the transport; only the session's connection pool is shared.

Error handling strategy:
    - `requests` network exceptions -> `TransportError` without status.
    - Non-2xx responses (when `raise_for_status`) -> `TransportError` with status
      and the server-supplied message when present.
"""

from __future__ import annotations

from typing import Any

import requests

from inliner.config import DEFAULT_TIMEOUT_SECONDS
from inliner.errors import TransportError
from inliner.transport.base import TransportResponse, error_message


class RequestsTransport:
    """`Transport` implementation backed by a `requests.Session`."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()

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
        """Send one HTTP request.

        Args:
            method: HTTP method.
            url: Absolute URL.
            headers: Optional request headers.
            params: Query parameters (mapping or list of pairs).
            json_body: Optional JSON body.
            files: Multipart file parts in `requests` format.
            data: Multipart form fields.
            raise_for_status: Raise on non-2xx when true.

        Returns:
            Completed response.

        Raises:
            TransportError: Network failure or rejected status.
        """
        try:
            response = self.session.request(
                method,
                url,
                headers=headers,
                params=params,
                json=json_body,
                files=files,
                data=data,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc:
            raise TransportError(f"Inliner API error: {exc}") from exc

        body = response.content or b""
        if raise_for_status and not 200 <= response.status_code < 300:
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

    def close(self) -> None:
        self.session.close()
