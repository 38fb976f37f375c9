"""Block-level document renderer.

Each line is classified by its leading characters and rendered on its own;
the document is the plain concatenation of the rendered lines.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable
from pathlib import Path

from mdblog.errors import ContentReadError, SlugNotFoundError
from mdblog.inline import render_inline
from mdblog.paths import slug_to_relpath

logger = logging.getLogger("mdblog.renderer")


class BlockKind(enum.Enum):
    HEADING_3 = "h3"
    HEADING_2 = "h2"
    HEADING_1 = "h1"
    LIST_ITEM = "li"
    TEXT = "text"


# Checked in order: the longest heading marker must win.
_BLOCK_PREFIXES: tuple[tuple[str, BlockKind], ...] = (
    ("### ", BlockKind.HEADING_3),
    ("## ", BlockKind.HEADING_2),
    ("# ", BlockKind.HEADING_1),
    ("- ", BlockKind.LIST_ITEM),
)


def classify_line(line: str) -> tuple[BlockKind, str]:
    """Return the block kind of `line` and its content with the marker stripped."""

    for prefix, kind in _BLOCK_PREFIXES:
        if line.startswith(prefix):
            return kind, line[len(prefix) :]
    return BlockKind.TEXT, line


def render_line(line: str) -> str:
    kind, content = classify_line(line)
    if kind is BlockKind.TEXT:
        return render_inline(content) + "<br>"
    if kind is BlockKind.LIST_ITEM:
        # Every item is its own list; consecutive items are not merged.
        return f"<ul><li>{content}</li></ul>"
    return f"<{kind.value}>{content}</{kind.value}>"


def render_lines(lines: Iterable[str]) -> str:
    return "".join(render_line(line) for line in lines)


def _strip_newline(raw: str) -> str:
    if raw.endswith("\r\n"):
        return raw[:-2]
    if raw.endswith("\n"):
        return raw[:-1]
    return raw


def render_document(slug: str, *, root: Path, extension: str = ".md") -> str:
    """Read the document for `slug` under `root` and render it to markup.

    Only `\\n` and `\\r\\n` end a line; a lone `\\r` stays part of the line.
    Undecodable bytes become U+FFFD instead of failing the document.

    Raises `SlugNotFoundError` when there is no such document and
    `ContentReadError` when it cannot be opened or read. Nothing partial is
    ever returned.
    """

    path = root / slug_to_relpath(slug, extension)
    try:
        fh = path.open(encoding="utf-8", errors="replace", newline="\n")
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
        raise SlugNotFoundError(slug) from e
    except OSError as e:
        raise ContentReadError(path) from e

    with fh:
        try:
            markup = render_lines(_strip_newline(raw) for raw in fh)
        except OSError as e:
            raise ContentReadError(path) from e

    logger.debug("Rendered %s (%d chars)", slug, len(markup))
    return markup
