"""Job orchestration core.

Composition:
    - `slugs`: text -> URL slug.
    - `paths`: content path construction for generate/edit flows.
    - `results`: payload normalization into `GenerationResult`.
    - `recommend`: best-effort smart-URL slug recommendation.
    - `poller`: per-attempt outcomes and the blocking/asyncio poll loops.
    - `orchestrator`: generate and edit flows.

Package import is side-effect free and only re-exports `slugify`.
"""

from inliner.core.slugs import slugify

__all__ = ["slugify"]
