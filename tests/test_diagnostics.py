from __future__ import annotations

from mdblog.diagnostics import format_build_failures, format_error_with_hint, format_hint
from mdblog.errors import ContentReadError, MdblogConfigError, SlugNotFoundError


def test_format_build_failures_empty() -> None:
    assert format_build_failures({}) == ""


def test_format_build_failures_lists_sorted_slugs() -> None:
    out = format_build_failures({"z": ["boom"], "a": ["bad", "worse"]})
    assert out.startswith("Build failed for 2 page(s):")
    assert out.index("  a:") < out.index("  z:")
    assert "    - worse" in out
    assert out.endswith("\n")


def test_hint_for_missing_project() -> None:
    exc = MdblogConfigError("Could not find mdblog.toml by walking upward from start path.")
    assert format_hint(exc) == "run `mdblog init` to create a new project"


def test_hint_for_missing_slug() -> None:
    assert "mdblog list" in (format_hint(SlugNotFoundError("x")) or "")


def test_hint_for_read_error_names_path() -> None:
    hint = format_hint(ContentReadError("content/a.md"))
    assert hint is not None
    assert "content/a.md" in hint


def test_no_hint_for_unknown_errors() -> None:
    assert format_hint(RuntimeError("x")) is None


def test_format_error_with_hint() -> None:
    out = format_error_with_hint(SlugNotFoundError("posts/nope"))
    lines = out.splitlines()
    assert lines[0] == "error: No document for slug 'posts/nope'."
    assert lines[1].startswith("hint: ")


def test_format_error_without_hint() -> None:
    assert format_error_with_hint(ValueError("plain")) == "error: plain"
