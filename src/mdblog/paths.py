"""Pure helpers for mapping slugs to document and output file paths."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

OUTPUT_SUFFIX = ".html"


def slug_to_relpath(slug: str, extension: str = ".md") -> Path:
    return Path(*PurePosixPath(f"{slug}{extension}").parts)


def relpath_to_slug(relpath: Path, extension: str = ".md") -> str | None:
    """Return the slug for a root-relative document path, or None if it is not a document."""

    rel_posix = relpath.as_posix()
    if not rel_posix.endswith(extension):
        return None
    if relpath.name == extension:
        # A bare ".md" file has no stem to name it by.
        return None
    return rel_posix[: -len(extension)]


def slug_to_output_relpath(slug: str) -> Path:
    return slug_to_relpath(slug, OUTPUT_SUFFIX)
