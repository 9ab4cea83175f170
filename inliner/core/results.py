"""Normalization of image payloads into `GenerationResult` records.

Payload forms:
    - `bytes`: already decoded, used as-is (CDN responses).
    - `str` data URI (`data:image/png;base64,...`): header dropped, remainder
      base64 decoded.
    - `str` plain base64: decoded directly.

Error handling strategy:
    Malformed base64 and payloads that are neither `str` nor `bytes` raise
    `DecodeError`. Empty bytes are never substituted.
"""

from __future__ import annotations

import base64
import binascii

from inliner.errors import DecodeError
from inliner.models import GenerationResult


def decode_payload(payload: str | bytes) -> bytes:
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload)
    if not isinstance(payload, str):
        raise DecodeError(f"Unsupported payload type: {type(payload).__name__}")
    if "," in payload:
        payload = payload.split(",", 1)[1]
    try:
        return base64.b64decode(payload.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"Malformed base64 payload: {exc}") from exc


def wrap_result(payload: str | bytes, content_path: str, image_url: str) -> GenerationResult:
    """Build the result record for `content_path` hosted under `image_url`."""
    return GenerationResult(
        data=decode_payload(payload),
        url=f"{image_url.rstrip('/')}/{content_path}",
        content_path=content_path,
    )


def inline_payload(response: dict) -> str | None:
    """Return `mediaAsset.data` from an API response, if present."""
    asset = response.get("mediaAsset")
    if isinstance(asset, dict) and asset.get("data"):
        return asset["data"]
    return None
