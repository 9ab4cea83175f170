"""Authenticated REST helpers on top of a transport.

Architectural role:
    Joins relative endpoint paths onto the API base URL, attaches the bearer
    token, decodes JSON bodies and resolves CDN URLs. Both the blocking and the
    asyncio flavours share the pure helpers at module level.

Determinism:
    URL and header construction is deterministic for a fixed `ClientConfig`.
"""

from __future__ import annotations

import json
from typing import Any

from inliner.config import ClientConfig
from inliner.errors import DecodeError
from inliner.transport.base import AsyncTransport, Transport, TransportResponse


def api_endpoint(config: ClientConfig, path: str) -> str:
    return f"{config.api_url}/{path.lstrip('/')}"


def asset_url(config: ClientConfig, content_path: str) -> str:
    return f"{config.image_url}/{content_path}"


def auth_headers(config: ClientConfig) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {config.api_key}",
        "Accept": "application/json",
    }


def decode_json(body: bytes) -> dict:
    """Decode a JSON response body.

    An empty body decodes to `{}`; non-object JSON is wrapped as `{"items": ...}`
    so list endpoints keep a uniform return type.

    Raises:
        DecodeError: If the body is not valid UTF-8 JSON.
    """
    if not body or not body.strip():
        return {}
    try:
        payload = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError(f"Malformed JSON response: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        return {"items": payload}
    return payload


class InlinerApi:
    """Blocking REST helper bound to one config and transport."""

    def __init__(self, config: ClientConfig, transport: Transport) -> None:
        self.config = config
        self.transport = transport

    def fetch(
        self,
        method: str,
        path: str,
        *,
        params: Any = None,
        json_body: Any = None,
        files: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
    ) -> dict:
        response = self.transport.request(
            method,
            api_endpoint(self.config, path),
            headers=auth_headers(self.config),
            params=params,
            json_body=json_body,
            files=files,
            data=data,
        )
        return decode_json(response.body)

    def fetch_asset(self, content_path: str) -> TransportResponse:
        """GET the asset from the CDN without raising on non-2xx statuses."""
        return self.transport.request(
            "GET", asset_url(self.config, content_path), raise_for_status=False
        )

    def asset_url(self, content_path: str) -> str:
        return asset_url(self.config, content_path)


class AsyncInlinerApi:
    """Asyncio counterpart of `InlinerApi`."""

    def __init__(self, config: ClientConfig, transport: AsyncTransport) -> None:
        self.config = config
        self.transport = transport

    async def fetch(
        self,
        method: str,
        path: str,
        *,
        params: Any = None,
        json_body: Any = None,
        files: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
    ) -> dict:
        response = await self.transport.request(
            method,
            api_endpoint(self.config, path),
            headers=auth_headers(self.config),
            params=params,
            json_body=json_body,
            files=files,
            data=data,
        )
        return decode_json(response.body)

    async def fetch_asset(self, content_path: str) -> TransportResponse:
        return await self.transport.request(
            "GET", asset_url(self.config, content_path), raise_for_status=False
        )

    def asset_url(self, content_path: str) -> str:
        return asset_url(self.config, content_path)
