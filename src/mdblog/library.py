"""Caller-facing content API: render a slug, list all slugs."""

from __future__ import annotations

from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING

from mdblog.cache import ContentCache
from mdblog.discovery import discover_slugs
from mdblog.renderer import render_document

if TYPE_CHECKING:  # pragma: no cover
    from mdblog.config import MdblogConfig


class ContentLibrary:
    """Documents under one content root, rendered lazily and cached per slug."""

    def __init__(self, root: Path, *, extension: str = ".md") -> None:
        self.root = root
        self.extension = extension
        self._cache = ContentCache(partial(render_document, root=root, extension=extension))

    @classmethod
    def from_config(cls, cfg: MdblogConfig, project_root: Path) -> ContentLibrary:
        return cls(project_root / cfg.content.root, extension=cfg.content.extension)

    @property
    def cache(self) -> ContentCache:
        return self._cache

    def render_content(self, slug: str) -> str:
        """Return the markup for `slug`, rendering it on first request only."""
        return self._cache.get(slug)

    def list_slugs(self) -> list[str]:
        """Walk the content root and return every slug (never cached)."""
        return discover_slugs(self.root, extension=self.extension)
