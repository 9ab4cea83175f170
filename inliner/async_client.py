"""Asyncio Inliner client.

Architectural role:
    Runs generate/edit/poll flows on an event loop using `httpx`, so many jobs can
    be awaited concurrently with `asyncio.gather` without one thread per job.

Scope:
    Generation, editing, polling and uploads. Asset/tag/project management stays
    on the blocking `InlinerClient`.

Cancellation:
    Cancelling the awaiting task stops polling immediately; an optional
    `asyncio.Event` can be passed instead.
"""

from __future__ import annotations

import asyncio
from typing import Any

from inliner.assets import upload_parts
from inliner.client import image_url_for
from inliner.config import ClientConfig, load_config
from inliner.core import slugs
from inliner.core.orchestrator import AsyncJobOrchestrator
from inliner.core.poller import AsyncPoller
from inliner.models import EditRequest, GenerationResult, JobRequest, UploadSpec, build_model
from inliner.transport.api import AsyncInlinerApi
from inliner.transport.async_http import HttpxAsyncTransport
from inliner.transport.base import AsyncTransport


class AsyncInlinerClient:
    """Asyncio client; arguments mirror `InlinerClient`."""

    def __init__(
        self,
        api_key: str | None = None,
        api_url: str | None = None,
        image_url: str | None = None,
        transport: AsyncTransport | None = None,
        config: ClientConfig | None = None,
        poller: AsyncPoller | None = None,
    ) -> None:
        self.config = config or load_config(api_key=api_key, api_url=api_url, image_url=image_url)
        self.transport = transport or HttpxAsyncTransport(timeout=self.config.request_timeout)
        self.api = AsyncInlinerApi(self.config, self.transport)
        self.poller = poller or AsyncPoller(self.api)
        self.jobs = AsyncJobOrchestrator(self.api, self.poller, self._upload)

    async def _upload(self, spec: UploadSpec) -> dict:
        files, data, params = upload_parts(spec)
        return await self.api.fetch("POST", "content/upload", files=files, data=data, params=params)

    async def generate_image(
        self,
        project: str,
        prompt: str,
        width: int | None = None,
        height: int | None = None,
        format: str = "png",
        smart_url: bool = True,
        max_seconds: float | None = None,
        cancel: asyncio.Event | None = None,
    ) -> GenerationResult:
        request = build_model(
            JobRequest,
            project=project,
            prompt=prompt,
            width=width,
            height=height,
            format=format,
            smart_url=smart_url,
        )
        return await self.jobs.generate(request, max_seconds, cancel)

    async def edit_image(
        self,
        source: Any,
        instruction: str,
        project: str | None = None,
        width: int | None = None,
        height: int | None = None,
        format: str = "png",
        max_seconds: float | None = None,
        cancel: asyncio.Event | None = None,
    ) -> GenerationResult:
        request = build_model(
            EditRequest,
            source=source,
            instruction=instruction,
            project=project,
            width=width,
            height=height,
            format=format,
        )
        return await self.jobs.edit(request, max_seconds, cancel)

    async def poll_image(
        self,
        content_path: str,
        label: str,
        max_seconds: float | None = None,
        cancel: asyncio.Event | None = None,
    ) -> GenerationResult:
        return await self.poller.poll(
            content_path.lstrip("/"),
            label,
            self.config.poll_max_seconds if max_seconds is None else max_seconds,
            cancel,
        )

    async def upload_image(
        self,
        file: Any,
        filename: str,
        project: str,
        slug: str | None = None,
        title: str | None = None,
        description: str | None = None,
        tags: list[str] | None = None,
        collection_id: str | None = None,
    ) -> dict:
        spec = build_model(
            UploadSpec,
            file=file,
            filename=filename,
            project=project,
            slug=slug,
            title=title,
            description=description,
            tags=list(tags) if tags else None,
            collection_id=collection_id,
        )
        return await self._upload(spec)

    def build_image_url(
        self,
        project: str,
        description: str,
        width: int,
        height: int,
        format: str = "png",
    ) -> str:
        return image_url_for(self.config, project, description, width, height, format)

    @staticmethod
    def slugify(text: str) -> str:
        return slugs.slugify(text)

    async def aclose(self) -> None:
        aclose = getattr(self.transport, "aclose", None)
        if aclose is not None:
            await aclose()

    async def __aenter__(self) -> "AsyncInlinerClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
