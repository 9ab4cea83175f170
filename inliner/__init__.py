"""Inliner image generation and hosting client.

Scope:
    Authenticated access to the Inliner REST API and CDN: text-to-image
    generation, image edits, polling for asynchronous jobs, uploads, asset search,
    tagging and project management.

Entry points:
    - `InlinerClient`: blocking client on `requests`.
    - `AsyncInlinerClient`: asyncio client on `httpx`.
    - `slugify`: the slug transform used in content paths.
"""

from inliner.async_client import AsyncInlinerClient
from inliner.client import InlinerClient
from inliner.config import ClientConfig, load_config
from inliner.core.slugs import slugify
from inliner.errors import (
    DecodeError,
    InlinerError,
    InlinerTimeoutError,
    PollCancelledError,
    RecommendationError,
    TransportError,
    ValidationError,
)
from inliner.models import GenerationResult

__version__ = "0.1.0"

__all__ = [
    "AsyncInlinerClient",
    "ClientConfig",
    "DecodeError",
    "GenerationResult",
    "InlinerClient",
    "InlinerError",
    "InlinerTimeoutError",
    "PollCancelledError",
    "RecommendationError",
    "TransportError",
    "ValidationError",
    "load_config",
    "slugify",
]
