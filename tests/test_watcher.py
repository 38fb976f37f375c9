"""Tests for mdblog.watcher module."""

from __future__ import annotations

import asyncio
import sys
import types
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

import pytest

from mdblog.watcher import ContentWatcher, RebuildResult, require_watchfiles

ROOT = Path("/site/content")


async def _batches(*batches: set[tuple[Any, str]]) -> AsyncIterator[set[tuple[Any, str]]]:
    for batch in batches:
        yield batch


def _run(watcher: ContentWatcher, *batches: set[tuple[Any, str]]):
    notes: list[str] = []
    results: list[RebuildResult] = []
    errors: list[BaseException] = []
    asyncio.run(
        watcher.run(
            _batches(*batches),
            notify=notes.append,
            on_result=results.append,
            on_error=errors.append,
        )
    )
    return notes, results, errors


def test_require_watchfiles_raises_when_missing(monkeypatch) -> None:
    monkeypatch.setitem(sys.modules, "watchfiles", None)
    with pytest.raises(ImportError, match="pip install mdblog\\[watch\\]"):
        require_watchfiles()


def test_require_watchfiles_succeeds_when_installed(monkeypatch) -> None:
    monkeypatch.setitem(sys.modules, "watchfiles", types.ModuleType("watchfiles"))
    require_watchfiles()


def test_documents_in_keeps_sorted_documents_under_root() -> None:
    watcher = ContentWatcher(ROOT, ".md", lambda: 0)
    changes = {
        (1, str(ROOT / "posts" / "b.md")),
        (2, str(ROOT / "a.md")),
        (2, str(ROOT / "a.md")),
    }
    assert watcher.documents_in(changes) == (ROOT / "a.md", ROOT / "posts" / "b.md")


def test_documents_in_ignores_other_files_and_outside_paths() -> None:
    watcher = ContentWatcher(ROOT, ".md", lambda: 0)
    changes = {
        (1, str(ROOT / "cover.png")),
        (1, str(ROOT / "a.md.swp")),
        (1, "/elsewhere/c.md"),
    }
    assert watcher.documents_in(changes) == ()


def test_run_rebuilds_once_per_batch_with_documents() -> None:
    calls: list[int] = []
    watcher = ContentWatcher(ROOT, ".md", lambda: calls.append(1) or 0)

    notes, results, errors = _run(
        watcher,
        {(1, str(ROOT / "ignored.txt"))},
        {(2, str(ROOT / "post.md"))},
    )

    assert calls == [1]
    assert errors == []
    assert [r.documents for r in results] == [(ROOT / "post.md",)]
    assert results[0].ok is True
    assert notes[0] == f"[watch] changed: {ROOT / 'post.md'}"
    assert notes[-1].startswith("[watch] rebuilt in ")


def test_run_reports_rebuild_errors_and_keeps_watching() -> None:
    calls: list[int] = []

    def rebuild() -> int:
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("boom")
        return 4

    watcher = ContentWatcher(ROOT, ".md", rebuild)
    _, results, errors = _run(watcher, {(1, str(ROOT / "a.md"))}, {(1, str(ROOT / "b.md"))})

    assert len(calls) == 2
    assert [str(e) for e in errors] == ["boom"]
    assert [r.exit_code for r in results] == [4]
    assert results[0].ok is False


def test_rebuild_result_to_json() -> None:
    result = RebuildResult(exit_code=4, elapsed_s=1.234, documents=(ROOT / "a.md", ROOT / "b.md"))
    assert result.to_json() == {
        "command": "watch",
        "ok": False,
        "exit_code": 4,
        "elapsed_s": 1.23,
        "documents": [str(ROOT / "a.md"), str(ROOT / "b.md")],
    }
