"""Request and result data contracts.

Request models are frozen pydantic models so that field constraints (positive
dimensions, non-empty prompts) are enforced once at construction. The result
record is a plain frozen dataclass: it is produced locally and never validated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from inliner.errors import ValidationError

# Local file sources: raw bytes, a filesystem path, or an open binary file.
# Kept as `Any` so pydantic never coerces between str and bytes.
FileSource = Any


class JobRequest(BaseModel):
    """Text-to-image generation request."""

    model_config = ConfigDict(frozen=True)

    project: str = Field(min_length=1)
    prompt: str = Field(min_length=1)
    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)
    format: str = "png"
    smart_url: bool = True


class EditRequest(BaseModel):
    """Edit of a remote image URL or a local file."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    source: FileSource
    instruction: str = Field(min_length=1)
    project: str | None = None
    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)
    format: str = "png"


class UploadSpec(BaseModel):
    """Multipart upload of a local asset."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    file: FileSource
    filename: str = Field(min_length=1)
    project: str = Field(min_length=1)
    slug: str | None = None
    title: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    collection_id: str | None = None


@dataclass(frozen=True)
class GenerationResult:
    """Terminal successful value of a generate/edit/poll call."""

    data: bytes
    url: str
    content_path: str


def build_model(model_cls, **fields):
    """Construct a request model, re-raising pydantic failures as `ValidationError`."""
    try:
        return model_cls(**fields)
    except PydanticValidationError as exc:
        raise ValidationError(str(exc)) from exc
