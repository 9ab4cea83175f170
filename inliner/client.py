"""Blocking Inliner client facade.

Architectural role:
    Public entrypoint. Freezes configuration at construction, wires the transport,
    REST helper, poller, orchestrator and asset service together, and exposes one
    method per public operation.

Concurrency:
    Instances hold no mutable per-job state. One client can serve concurrent
    `generate_image`/`edit_image` calls from several threads; each call runs its
    own poll loop against the shared transport.

Error handling strategy:
    - Invalid arguments -> `ValidationError` before any request.
    - Transport faults outside polling -> `TransportError`.
    - Exhausted polling -> `InlinerTimeoutError`.
"""

from __future__ import annotations

import threading
from typing import Any

from inliner.assets import AssetService
from inliner.config import ClientConfig, load_config
from inliner.core import slugs
from inliner.core.orchestrator import JobOrchestrator
from inliner.core.poller import Poller
from inliner.models import EditRequest, GenerationResult, JobRequest, UploadSpec, build_model
from inliner.transport.api import InlinerApi
from inliner.transport.base import Transport
from inliner.transport.http import RequestsTransport


def image_url_for(
    config: ClientConfig,
    project: str,
    description: str,
    width: int,
    height: int,
    format: str = "png",
) -> str:
    return f"{config.image_url}/{project}/{slugs.slugify(description)}_{width}x{height}.{format}"


class InlinerClient:
    """Client for the Inliner image generation and hosting API.

    Args:
        api_key: Bearer token; falls back to `INLINER_API_KEY`.
        api_url: REST base URL; falls back to `INLINER_API_URL`.
        image_url: CDN base URL; falls back to `INLINER_IMAGE_URL`.
        transport: Optional transport; defaults to `RequestsTransport`.
        config: Fully built configuration; overrides the individual arguments.
        poller: Optional poll loop, mainly for injecting a test clock.
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_url: str | None = None,
        image_url: str | None = None,
        transport: Transport | None = None,
        config: ClientConfig | None = None,
        poller: Poller | None = None,
    ) -> None:
        self.config = config or load_config(api_key=api_key, api_url=api_url, image_url=image_url)
        self.transport = transport or RequestsTransport(timeout=self.config.request_timeout)
        self.api = InlinerApi(self.config, self.transport)
        self.poller = poller or Poller(self.api)
        self.assets = AssetService(self.api)
        self.jobs = JobOrchestrator(self.api, self.poller, self.assets.upload)

    # --- Generation & editing ---

    def generate_image(
        self,
        project: str,
        prompt: str,
        width: int | None = None,
        height: int | None = None,
        format: str = "png",
        smart_url: bool = True,
        max_seconds: float | None = None,
        cancel: threading.Event | None = None,
    ) -> GenerationResult:
        """Generate an image from a text prompt and wait for the result."""
        request = build_model(
            JobRequest,
            project=project,
            prompt=prompt,
            width=width,
            height=height,
            format=format,
            smart_url=smart_url,
        )
        return self.jobs.generate(request, max_seconds, cancel)

    def edit_image(
        self,
        source: Any,
        instruction: str,
        project: str | None = None,
        width: int | None = None,
        height: int | None = None,
        format: str = "png",
        max_seconds: float | None = None,
        cancel: threading.Event | None = None,
    ) -> GenerationResult:
        """Edit a remote image URL or a local file and wait for the result.

        Local sources (bytes, paths, file objects) are uploaded first and require
        `project`.
        """
        request = build_model(
            EditRequest,
            source=source,
            instruction=instruction,
            project=project,
            width=width,
            height=height,
            format=format,
        )
        return self.jobs.edit(request, max_seconds, cancel)

    def poll_image(
        self,
        content_path: str,
        label: str,
        max_seconds: float | None = None,
        cancel: threading.Event | None = None,
    ) -> GenerationResult:
        return self.poller.poll(
            content_path.lstrip("/"),
            label,
            self.config.poll_max_seconds if max_seconds is None else max_seconds,
            cancel,
        )

    # --- Asset management ---

    def upload_image(
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
        return self.assets.upload(spec)

    def list_images(self, options: dict | None = None) -> dict:
        return self.assets.list_images(options)

    def search(self, expression: str, options: dict | None = None) -> dict:
        return self.assets.search(expression, options)

    def delete_images(self, content_ids: list[str]) -> dict:
        return self.assets.delete(content_ids)

    def rename_image(self, content_id: str, new_url: str) -> dict:
        return self.assets.rename(content_id, new_url)

    # --- Tagging ---

    def get_all_tags(self) -> dict:
        return self.assets.all_tags()

    def add_tags(self, content_ids: list[str], tags: list[str]) -> dict:
        return self.assets.add_tags(content_ids, tags)

    def remove_tags(self, content_ids: list[str], tags: list[str]) -> dict:
        return self.assets.remove_tags(content_ids, tags)

    def replace_tags(self, content_ids: list[str], tags: list[str]) -> dict:
        return self.assets.replace_tags(content_ids, tags)

    # --- Projects ---

    def list_projects(self) -> dict:
        return self.assets.list_projects()

    def create_project(self, project_data: dict) -> dict:
        return self.assets.create_project(project_data)

    def get_project_details(self, project_id: str) -> dict:
        return self.assets.project_details(project_id)

    # --- Helpers ---

    def build_image_url(
        self,
        project: str,
        description: str,
        width: int,
        height: int,
        format: str = "png",
    ) -> str:
        """CDN URL for an on-demand image described by free text."""
        return image_url_for(self.config, project, description, width, height, format)

    @staticmethod
    def slugify(text: str) -> str:
        return slugs.slugify(text)

    def close(self) -> None:
        close = getattr(self.transport, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "InlinerClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
