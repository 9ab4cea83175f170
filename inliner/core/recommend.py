"""Smart-URL slug recommendation.

The recommendation call is best-effort: its outcome is returned as an explicit
`SlugRecommendation` value instead of being raised, and the orchestrator decides
whether a failure is ignored or propagated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from inliner.errors import InlinerError, RecommendationError
from inliner.models import JobRequest
from inliner.transport.api import AsyncInlinerApi, InlinerApi

logger = logging.getLogger(__name__)

RECOMMEND_ENDPOINT = "url/recommend"


@dataclass(frozen=True)
class SlugRecommendation:
    """Either a server-suggested slug or the error that prevented one.

    Both fields are `None` when the call succeeded without a suggestion.
    """

    slug: str | None = None
    error: RecommendationError | None = None


def recommend_payload(request: JobRequest) -> dict:
    return {
        "prompt": request.prompt,
        "project": request.project,
        "width": request.width,
        "height": request.height,
        "extension": request.format,
    }


def _from_response(response: dict) -> SlugRecommendation:
    slug = response.get("recommended_slug")
    return SlugRecommendation(slug=slug if isinstance(slug, str) and slug else None)


def _from_error(exc: InlinerError) -> SlugRecommendation:
    error = RecommendationError(f"Slug recommendation failed: {exc}")
    error.__cause__ = exc
    return SlugRecommendation(error=error)


def recommend_slug(api: InlinerApi, request: JobRequest) -> SlugRecommendation:
    try:
        response = api.fetch("POST", RECOMMEND_ENDPOINT, json_body=recommend_payload(request))
    except InlinerError as exc:
        return _from_error(exc)
    return _from_response(response)


async def arecommend_slug(api: AsyncInlinerApi, request: JobRequest) -> SlugRecommendation:
    try:
        response = await api.fetch("POST", RECOMMEND_ENDPOINT, json_body=recommend_payload(request))
    except InlinerError as exc:
        return _from_error(exc)
    return _from_response(response)


def choose_slug(recommendation: SlugRecommendation, fallback: str, policy: str) -> str:
    """Pick the slug for a generation job.

    Args:
        recommendation: Result of the smart-URL call.
        fallback: Locally computed slug.
        policy: `"ignore"` falls back on failure, `"raise"` propagates it.

    Raises:
        RecommendationError: On failure under the `"raise"` policy.
    """
    if recommendation.error is not None:
        if policy == "raise":
            raise recommendation.error
        logger.warning("%s; using local slug %r", recommendation.error, fallback)
        return fallback
    return recommendation.slug or fallback
