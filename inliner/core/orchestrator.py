"""Generate and edit flows.

Architectural role:
    Composes slugification, the optional smart-URL recommendation, content path
    construction and polling into the two public job flows.

Generate lifecycle:
    1. Slugify the prompt locally.
    2. If `smart_url`, ask `url/recommend` for a slug; failures follow the
       configured policy (fall back to the local slug by default).
    3. `POST content/generate` with the chosen slug.
    4. An inline `mediaAsset.data` payload is returned without polling.
    5. Otherwise poll the content path with label "Generating".

Edit lifecycle:
    - Remote source: chain the instruction onto the URL's asset path and poll.
    - Local source: require a project, upload the file under a synthetic slug,
      chain onto the uploaded asset path and poll.
    Both branches poll with label "Editing".

Error handling strategy:
    Validation errors are raised before any network call. Transport errors from
    the generate and upload calls propagate; polling errors surface as
    `InlinerTimeoutError`.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from typing import Awaitable, Callable

from inliner.assets import uploaded_content_path
from inliner.core import paths
from inliner.core.poller import AsyncPoller, Poller
from inliner.core.recommend import arecommend_slug, choose_slug, recommend_slug
from inliner.core.results import inline_payload, wrap_result
from inliner.core.slugs import slugify
from inliner.errors import TransportError, ValidationError
from inliner.models import EditRequest, GenerationResult, JobRequest, UploadSpec
from inliner.transport.api import AsyncInlinerApi, InlinerApi

logger = logging.getLogger(__name__)

GENERATE_ENDPOINT = "content/generate"
GENERATING = "Generating"
EDITING = "Editing"


def generate_payload(request: JobRequest, slug: str) -> dict:
    return {
        "prompt": request.prompt,
        "project": request.project,
        "slug": slug,
        "width": request.width,
        "height": request.height,
        "extension": request.format,
    }


def source_upload(request: EditRequest, now: float) -> UploadSpec:
    """`UploadSpec` for a local edit source.

    Raises:
        ValidationError: If the request has no project namespace.
    """
    if not request.project:
        raise ValidationError("Project namespace is required when editing local files")
    slug = paths.upload_source_slug(now)
    return UploadSpec(file=request.source, filename=f"{slug}.png", project=request.project, slug=slug)


def edit_path_from_upload(request: EditRequest, upload_response: dict) -> str:
    base = uploaded_content_path(upload_response)
    if base is None:
        raise TransportError("Upload response did not include a content path")
    return paths.for_edit(base, request.instruction, request.width, request.height, request.format)


def remote_edit_path(request: EditRequest) -> str:
    return paths.for_edit(
        paths.source_asset_path(request.source),
        request.instruction,
        request.width,
        request.height,
        request.format,
    )


class JobOrchestrator:
    """Blocking generate/edit flows.

    Args:
        api: REST helper; its config supplies the recommendation policy and
            default polling budget.
        poller: Poll loop used for every non-inline result.
        upload: Callable uploading an `UploadSpec` and returning the JSON response.
        clock: Time source for synthetic upload slugs.
    """

    def __init__(
        self,
        api: InlinerApi,
        poller: Poller,
        upload: Callable[[UploadSpec], dict],
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.api = api
        self.poller = poller
        self.upload = upload
        self.clock = clock

    def _budget(self, max_seconds: float | None) -> float:
        return self.api.config.poll_max_seconds if max_seconds is None else max_seconds

    def generate(
        self,
        request: JobRequest,
        max_seconds: float | None = None,
        cancel: threading.Event | None = None,
    ) -> GenerationResult:
        slug = slugify(request.prompt)
        if request.smart_url:
            slug = choose_slug(
                recommend_slug(self.api, request), slug, self.api.config.recommendation_failures
            )

        response = self.api.fetch("POST", GENERATE_ENDPOINT, json_body=generate_payload(request, slug))
        content_path = paths.for_generation(request.project, slug, request.format, response.get("prompt"))

        payload = inline_payload(response)
        if payload is not None:
            logger.info("%s %s: returned inline", GENERATING, content_path)
            return wrap_result(payload, content_path, self.api.config.image_url)

        return self.poller.poll(content_path, GENERATING, self._budget(max_seconds), cancel)

    def edit(
        self,
        request: EditRequest,
        max_seconds: float | None = None,
        cancel: threading.Event | None = None,
    ) -> GenerationResult:
        if paths.is_remote_source(request.source):
            content_path = remote_edit_path(request)
        else:
            spec = source_upload(request, self.clock())
            content_path = edit_path_from_upload(request, self.upload(spec))

        return self.poller.poll(content_path, EDITING, self._budget(max_seconds), cancel)


class AsyncJobOrchestrator:
    """Asyncio counterpart of `JobOrchestrator`."""

    def __init__(
        self,
        api: AsyncInlinerApi,
        poller: AsyncPoller,
        upload: Callable[[UploadSpec], Awaitable[dict]],
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.api = api
        self.poller = poller
        self.upload = upload
        self.clock = clock

    def _budget(self, max_seconds: float | None) -> float:
        return self.api.config.poll_max_seconds if max_seconds is None else max_seconds

    async def generate(
        self,
        request: JobRequest,
        max_seconds: float | None = None,
        cancel: asyncio.Event | None = None,
    ) -> GenerationResult:
        slug = slugify(request.prompt)
        if request.smart_url:
            slug = choose_slug(
                await arecommend_slug(self.api, request), slug, self.api.config.recommendation_failures
            )

        response = await self.api.fetch("POST", GENERATE_ENDPOINT, json_body=generate_payload(request, slug))
        content_path = paths.for_generation(request.project, slug, request.format, response.get("prompt"))

        payload = inline_payload(response)
        if payload is not None:
            logger.info("%s %s: returned inline", GENERATING, content_path)
            return wrap_result(payload, content_path, self.api.config.image_url)

        return await self.poller.poll(content_path, GENERATING, self._budget(max_seconds), cancel)

    async def edit(
        self,
        request: EditRequest,
        max_seconds: float | None = None,
        cancel: asyncio.Event | None = None,
    ) -> GenerationResult:
        if paths.is_remote_source(request.source):
            content_path = remote_edit_path(request)
        else:
            spec = source_upload(request, self.clock())
            content_path = edit_path_from_upload(request, await self.upload(spec))

        return await self.poller.poll(content_path, EDITING, self._budget(max_seconds), cancel)
