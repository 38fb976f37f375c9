"""mdblog exception hierarchy.

Keep this module small and dependency-free: it is imported broadly across the
project and by tests.
"""

from __future__ import annotations

from pathlib import Path


class MdblogError(Exception):
    """Base exception for all mdblog errors."""


class MdblogConfigError(MdblogError):
    """Raised for invalid user configuration."""


class SlugNotFoundError(MdblogError):
    """Raised when no document exists for a requested slug."""

    def __init__(self, slug: str, message: str | None = None) -> None:
        super().__init__(message or f"No document for slug {slug!r}.")
        self.slug = slug


class ContentReadError(MdblogError):
    """Raised when the content store cannot be listed or a document cannot be read."""

    def __init__(self, path: Path | str, message: str | None = None) -> None:
        super().__init__(message or f"Failed reading content at: {path}")
        self.path = Path(path)
