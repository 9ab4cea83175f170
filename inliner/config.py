"""Client configuration for the Inliner API.

Architectural role:
    Centralizes credentials, endpoint base URLs and timing policy consumed by the
    transport, poller and orchestrator layers. The resulting `ClientConfig` is
    frozen at construction and passed explicitly to every component.

Resolution order:
    1. Explicit keyword arguments to `load_config`.
    2. Environment variables (a local `.env` file is loaded at import time).
    3. Built-in defaults.

Relevant environment variables:
    - `INLINER_API_KEY`
    - `INLINER_API_URL`
    - `INLINER_IMAGE_URL`
    - `INLINER_TIMEOUT_SECONDS`
    - `INLINER_POLL_MAX_SECONDS`
    - `INLINER_RECOMMENDATION_FAILURES`

Security considerations:
    The API key is excluded from the dataclass repr so it never ends up in logs.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from inliner.errors import ValidationError

load_dotenv()

DEFAULT_API_URL = "https://api.inliner.ai"
DEFAULT_IMAGE_URL = "https://img.inliner.ai"
DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_POLL_MAX_SECONDS = 180

# Recommendation failure policies accepted by the orchestrator.
RECOMMENDATION_POLICIES = ("ignore", "raise")


@dataclass(frozen=True)
class ClientConfig:
    """Immutable client configuration.

    Attributes:
        api_key: Bearer token sent with every API request.
        api_url: REST API base URL, stored without trailing slash.
        image_url: CDN base URL, stored without trailing slash.
        request_timeout: Per-call socket timeout in seconds.
        poll_max_seconds: Default polling budget for generate/edit flows.
        recommendation_failures: `"ignore"` to fall back to the local slug when
            the smart-URL call fails, `"raise"` to propagate the failure.
            Matched case-insensitively.
    """

    api_key: str = field(repr=False)
    api_url: str = DEFAULT_API_URL
    image_url: str = DEFAULT_IMAGE_URL
    request_timeout: float = DEFAULT_TIMEOUT_SECONDS
    poll_max_seconds: int = DEFAULT_POLL_MAX_SECONDS
    recommendation_failures: str = "ignore"

    def __post_init__(self) -> None:
        if not self.api_key or not self.api_key.strip():
            raise ValidationError("Inliner API key is required")
        policy = self.recommendation_failures.strip().lower()
        object.__setattr__(self, "recommendation_failures", policy)
        object.__setattr__(self, "api_url", self.api_url.rstrip("/"))
        object.__setattr__(self, "image_url", self.image_url.rstrip("/"))
        if self.recommendation_failures not in RECOMMENDATION_POLICIES:
            raise ValidationError(
                f"Unknown recommendation failure policy: {self.recommendation_failures!r}"
            )


def load_config(
    api_key: str | None = None,
    api_url: str | None = None,
    image_url: str | None = None,
    request_timeout: float | None = None,
    poll_max_seconds: int | None = None,
    recommendation_failures: str | None = None,
) -> ClientConfig:
    """Build a `ClientConfig` from arguments, environment and defaults.

    Raises:
        ValidationError: If no API key is available or a numeric variable is
            malformed.
    """
    api_key = api_key or os.getenv("INLINER_API_KEY", "").strip()
    if not api_key:
        raise ValidationError("INLINER_API_KEY is not set")

    try:
        timeout = (
            request_timeout
            if request_timeout is not None
            else float(os.getenv("INLINER_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))
        )
        max_seconds = (
            poll_max_seconds
            if poll_max_seconds is not None
            else int(os.getenv("INLINER_POLL_MAX_SECONDS", DEFAULT_POLL_MAX_SECONDS))
        )
    except ValueError as exc:
        raise ValidationError(f"Invalid numeric configuration: {exc}") from exc

    return ClientConfig(
        api_key=api_key,
        api_url=api_url or os.getenv("INLINER_API_URL", DEFAULT_API_URL),
        image_url=image_url or os.getenv("INLINER_IMAGE_URL", DEFAULT_IMAGE_URL),
        request_timeout=timeout,
        poll_max_seconds=max_seconds,
        recommendation_failures=(
            recommendation_failures or os.getenv("INLINER_RECOMMENDATION_FAILURES", "ignore")
        ),
    )
