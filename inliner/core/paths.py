"""Content path construction for generation and edit flows.

Architectural role:
    A content path is the key shared by the generation API and the CDN. It is
    always computed before polling starts and never depends on poll results.

Shapes:
    - Generation: `<project>/<slug>.<format>`, or the server-echoed path.
    - Edit: `<source base>/<instruction slug>[_<w>x<h>].<format>`, where the
      source base is the original asset path without its file extension. Edits
      therefore chain onto the asset they derive from.
"""

from __future__ import annotations

import posixpath
import time
from urllib.parse import urlparse

from inliner.core.slugs import slugify


def for_generation(project: str, slug: str, fmt: str, echoed: str | None = None) -> str:
    """Return the content path of a generation job.

    Args:
        project: Project namespace.
        slug: Chosen slug (recommended or local).
        fmt: Image format extension.
        echoed: `prompt` field echoed by the generate endpoint, if any.

    Returns:
        The echoed path without leading slash when non-empty, else
        `<project>/<slug>.<fmt>`.
    """
    echoed_path = echoed.lstrip("/") if isinstance(echoed, str) else ""
    if echoed_path:
        return echoed_path
    return f"{project}/{slug}.{fmt}"


def dimension_suffix(width: int | None, height: int | None) -> str:
    if width and height:
        return f"_{width}x{height}"
    return ""


def is_remote_source(source) -> bool:
    return isinstance(source, str) and urlparse(source).scheme in ("http", "https")


def source_asset_path(url: str) -> str:
    """Asset path of a CDN URL, without query, fragment or leading slash."""
    return urlparse(url).path.lstrip("/")


def for_edit(
    base_path: str,
    instruction: str,
    width: int | None,
    height: int | None,
    fmt: str,
) -> str:
    """Return the chained content path of an edit job.

    Args:
        base_path: Path of the source asset (remote URL path or uploaded path).
        instruction: Free-text edit instruction, slugified into the new segment.
        width: Optional output width; used only together with `height`.
        height: Optional output height.
        fmt: Output format extension.
    """
    base = base_path.strip("/")
    stem, _ext = posixpath.splitext(base)
    if stem:
        base = stem
    segment = f"{slugify(instruction)}{dimension_suffix(width, height)}.{fmt}"
    return f"{base}/{segment}" if base else segment


def upload_source_slug(now: float | None = None) -> str:
    """Synthetic slug for a local file uploaded as an edit source."""
    stamp = int(time.time() if now is None else now)
    return slugify(f"edit-source-{stamp}")
