"""Slug discovery: walk the content root and list every document slug.

Each call walks the whole tree again; nothing is remembered between calls.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from mdblog.errors import ContentReadError
from mdblog.paths import relpath_to_slug

logger = logging.getLogger("mdblog.discovery")


def _list_dir(directory: Path) -> list[os.DirEntry[str]]:
    try:
        with os.scandir(directory) as it:
            return sorted(it, key=lambda e: e.name)
    except OSError as e:
        raise ContentReadError(directory, f"Failed listing content directory: {directory}") from e


def _is_subdirectory(entry: os.DirEntry[str]) -> bool:
    # Symlinked directories are not followed, so a link back up the tree cannot loop.
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError as e:
        raise ContentReadError(entry.path) from e


def _walk(directory: Path, *, root: Path, extension: str) -> list[str]:
    slugs: list[str] = []
    for entry in _list_dir(directory):
        path = Path(entry.path)
        if _is_subdirectory(entry):
            slugs.extend(_walk(path, root=root, extension=extension))
            continue
        if not entry.name.endswith(extension):
            continue
        slug = relpath_to_slug(path.relative_to(root), extension)
        if slug is not None:
            slugs.append(slug)
    return slugs


def discover_slugs(root: Path, *, extension: str = ".md") -> list[str]:
    """Return the slug of every document under `root`, in traversal order.

    - Directories are entered as they are met, so nested slugs appear where
      their directory sorts among its siblings.
    - Only files ending in `extension` count; everything else is ignored.
    - Slugs are `/`-separated and carry neither `root` nor `extension`.

    Raises `ContentReadError` if `root` or any directory below it cannot be
    listed.
    """

    slugs = _walk(root, root=root, extension=extension)
    logger.debug("Discovered %d slug(s) under %s", len(slugs), root)
    return slugs
