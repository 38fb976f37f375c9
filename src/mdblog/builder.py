from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from mdblog.errors import MdblogError
from mdblog.library import ContentLibrary
from mdblog.paths import slug_to_output_relpath

logger = logging.getLogger("mdblog.builder")


@dataclass(frozen=True)
class BuildReport:
    written: dict[str, Path] = field(default_factory=dict)
    failed: dict[str, list[str]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def write_page(*, out_dir: Path, slug: str, markup: str) -> Path:
    """Atomically write the rendered page for `slug` under `out_dir`."""

    out_path = (out_dir / slug_to_output_relpath(slug)).resolve()
    root = out_dir.resolve()
    if root not in out_path.parents:
        raise ValueError(f"Refusing to write outside out_dir: {slug!r}")

    out_path.parent.mkdir(parents=True, exist_ok=True)

    # Write atomically: temp file in the same directory then os.replace.
    fd, tmp = tempfile.mkstemp(
        dir=str(out_path.parent),
        prefix=".mdblog-tmp-",
        suffix=".html",
        text=True,
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(markup)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, out_path)
    finally:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass
    return out_path


async def run_build(
    *,
    library: ContentLibrary,
    out_dir: Path,
    slugs: list[str] | None = None,
    jobs: int = 4,
) -> BuildReport:
    """Render every slug and write it to `out_dir`, at most `jobs` at a time.

    A failing slug is recorded in the report and does not stop the others.
    """

    jobs = max(1, int(jobs))
    if slugs is None:
        slugs = library.list_slugs()

    sem = asyncio.Semaphore(jobs)
    written: dict[str, Path] = {}
    failed: dict[str, list[str]] = {}

    def build_one(slug: str) -> Path:
        markup = library.render_content(slug)
        return write_page(out_dir=out_dir, slug=slug, markup=markup)

    async def run_one(slug: str) -> None:
        async with sem:
            try:
                path = await asyncio.to_thread(build_one, slug)
            except (MdblogError, OSError, ValueError) as e:
                logger.warning("Failed building %s: %s", slug, e)
                failed[slug] = [str(e) or type(e).__name__]
                return
        logger.debug("Wrote %s -> %s", slug, path)
        written[slug] = path

    await asyncio.gather(*(run_one(s) for s in slugs))
    return BuildReport(written=written, failed=failed)
