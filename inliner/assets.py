"""Asset, tag and project management endpoints.

Architectural role:
    Thin request builders over `InlinerApi.fetch`. Responses are returned as
    decoded JSON dictionaries without further interpretation.

Upload encoding:
    `file` multipart part plus `project` and `prompt` fields, optional `title`,
    `description` and `collectionId` fields. Tags travel as repeated `tags[]`
    query parameters. The `prompt` field carries the slug, defaulting to the
    slugified filename stem.

Error handling strategy:
    `TransportError` and `DecodeError` propagate unchanged to the caller.
"""

from __future__ import annotations

from pathlib import Path, PurePath
from typing import Any

from inliner.core.slugs import slugify
from inliner.models import UploadSpec
from inliner.transport.api import InlinerApi


def _file_content(file: Any) -> Any:
    """Resolve an upload source into bytes or a readable file object.

    Paths to existing files are read; other strings are sent as literal content.
    """
    if isinstance(file, (bytes, bytearray)):
        return bytes(file)
    if isinstance(file, PurePath):
        return Path(file).read_bytes()
    if isinstance(file, str):
        path = Path(file)
        if path.is_file():
            return path.read_bytes()
        return file.encode("utf-8")
    return file


def upload_parts(spec: UploadSpec) -> tuple[dict, dict, list]:
    """Return `(files, data, params)` for a `content/upload` request."""
    files = {"file": (spec.filename, _file_content(spec.file))}
    data = {
        "project": spec.project,
        "prompt": spec.slug or slugify(PurePath(spec.filename).stem),
    }
    if spec.title:
        data["title"] = spec.title
    if spec.description:
        data["description"] = spec.description
    if spec.collection_id:
        data["collectionId"] = spec.collection_id
    params = [("tags[]", tag) for tag in spec.tags or []]
    return files, data, params


def uploaded_content_path(response: dict) -> str | None:
    """Content path of an uploaded asset (`content.prompt`), if present."""
    content = response.get("content")
    if isinstance(content, dict) and content.get("prompt"):
        return str(content["prompt"]).lstrip("/")
    return None


def _tag_body(content_ids: list[str], tags: list[str]) -> dict:
    return {"contentIds": list(content_ids), "tags": list(tags)}


class AssetService:
    """Blocking asset management operations."""

    def __init__(self, api: InlinerApi) -> None:
        self.api = api

    def upload(self, spec: UploadSpec) -> dict:
        files, data, params = upload_parts(spec)
        return self.api.fetch("POST", "content/upload", files=files, data=data, params=params)

    def list_images(self, options: dict | None = None) -> dict:
        return self.api.fetch("GET", "content/images", params=dict(options or {}))

    def search(self, expression: str, options: dict | None = None) -> dict:
        params = {"expression": expression, **(options or {})}
        return self.api.fetch("GET", "content/search", params=params)

    def delete(self, content_ids: list[str]) -> dict:
        return self.api.fetch("POST", "content/delete", json_body={"contentIds": list(content_ids)})

    def rename(self, content_id: str, new_url: str) -> dict:
        return self.api.fetch("POST", f"content/rename/{content_id}", json_body={"newUrl": new_url})

    def all_tags(self) -> dict:
        return self.api.fetch("GET", "content/tags")

    def add_tags(self, content_ids: list[str], tags: list[str]) -> dict:
        return self.api.fetch("POST", "content/tags", json_body=_tag_body(content_ids, tags))

    def remove_tags(self, content_ids: list[str], tags: list[str]) -> dict:
        return self.api.fetch("POST", "content/tags/remove", json_body=_tag_body(content_ids, tags))

    def replace_tags(self, content_ids: list[str], tags: list[str]) -> dict:
        return self.api.fetch("POST", "content/tags/replace", json_body=_tag_body(content_ids, tags))

    def list_projects(self) -> dict:
        return self.api.fetch("GET", "account/projects")

    def create_project(self, project_data: dict) -> dict:
        return self.api.fetch("POST", "account/projects", json_body=dict(project_data))

    def project_details(self, project_id: str) -> dict:
        return self.api.fetch("GET", f"account/projects/{project_id}")
