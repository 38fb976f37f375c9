"""Watch mode: re-export the site when documents change.

`ContentWatcher` turns raw watchfiles batches into rebuilds. Only documents
under the content root count; images, editor swap files and the output
directory never trigger one.
"""

from __future__ import annotations

import asyncio
import importlib
import logging
import time
from collections.abc import AsyncIterable, AsyncIterator, Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger("mdblog.watcher")

WATCH_DEBOUNCE_MS = 200

Changes = set[tuple[Any, str]]


@dataclass(frozen=True, slots=True)
class RebuildResult:
    exit_code: int
    elapsed_s: float
    documents: tuple[Path, ...]

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def to_json(self) -> dict[str, object]:
        return {
            "command": "watch",
            "ok": self.ok,
            "exit_code": self.exit_code,
            "elapsed_s": round(self.elapsed_s, 2),
            "documents": [str(p) for p in self.documents],
        }


def require_watchfiles() -> None:
    try:
        importlib.import_module("watchfiles")
    except ImportError:
        raise ImportError("Watch mode needs watchfiles: pip install mdblog[watch]") from None


class ContentWatcher:
    """Run `rebuild` once for every batch of changes that touches a document.

    `rebuild` returns a CLI exit code. It runs on a worker thread because an
    export starts its own event loop.
    """

    def __init__(self, content_root: Path, extension: str, rebuild: Callable[[], int]) -> None:
        self.content_root = content_root
        self.extension = extension
        self._rebuild = rebuild

    def documents_in(self, changes: Iterable[tuple[Any, str]]) -> tuple[Path, ...]:
        found: set[Path] = set()
        for _kind, raw in changes:
            path = Path(raw)
            if path.name.endswith(self.extension) and path.is_relative_to(self.content_root):
                found.add(path)
        return tuple(sorted(found))

    def rebuild(self, documents: tuple[Path, ...]) -> RebuildResult:
        started = time.monotonic()
        exit_code = self._rebuild()
        return RebuildResult(
            exit_code=exit_code, elapsed_s=time.monotonic() - started, documents=documents
        )

    async def run(
        self,
        changes: AsyncIterable[Changes],
        *,
        notify: Callable[[str], None],
        on_result: Callable[[RebuildResult], None],
        on_error: Callable[[BaseException], None],
    ) -> None:
        async for batch in changes:
            documents = self.documents_in(batch)
            if not documents:
                logger.debug("Ignoring %d change(s) outside %s", len(batch), self.content_root)
                continue

            notify("[watch] changed: " + ", ".join(str(p) for p in documents))
            try:
                result = await asyncio.to_thread(self.rebuild, documents)
            except Exception as exc:
                # The watch keeps going; the next save gets another try.
                on_error(exc)
                continue
            notify(f"[watch] rebuilt in {result.elapsed_s:.1f}s")
            on_result(result)


def watch_changes(*paths: Path) -> AsyncIterator[Changes]:
    import watchfiles  # type: ignore[import-untyped]

    return watchfiles.awatch(*paths, debounce=WATCH_DEBOUNCE_MS)
