from __future__ import annotations

from pathlib import Path

import pytest

from mdblog.errors import ContentReadError, SlugNotFoundError
from mdblog.renderer import BlockKind, classify_line, render_document, render_line, render_lines


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


@pytest.mark.parametrize(
    ("line", "kind", "content"),
    [
        ("### Deep", BlockKind.HEADING_3, "Deep"),
        ("## Mid", BlockKind.HEADING_2, "Mid"),
        ("# Top", BlockKind.HEADING_1, "Top"),
        ("- item", BlockKind.LIST_ITEM, "item"),
        ("#### Too deep", BlockKind.TEXT, "#### Too deep"),
        ("#nospace", BlockKind.TEXT, "#nospace"),
        ("-nospace", BlockKind.TEXT, "-nospace"),
        ("", BlockKind.TEXT, ""),
    ],
)
def test_classify_line(line: str, kind: BlockKind, content: str) -> None:
    assert classify_line(line) == (kind, content)


def test_headings() -> None:
    assert render_line("# Title") == "<h1>Title</h1>"
    assert render_line("## Title") == "<h2>Title</h2>"
    assert render_line("### Title") == "<h3>Title</h3>"


def test_heading_content_is_not_inline_rendered() -> None:
    assert render_line("# **x**") == "<h1>**x**</h1>"


def test_list_item() -> None:
    assert render_line("- item") == "<ul><li>item</li></ul>"


def test_consecutive_list_items_are_separate_lists() -> None:
    out = render_lines(["- one", "- two"])
    assert out == "<ul><li>one</li></ul><ul><li>two</li></ul>"
    assert out.count("<ul>") == 2


def test_text_line_gets_inline_markup_and_break() -> None:
    assert render_line("hello **world**") == "hello <strong>world</strong><br>"


def test_blank_line_is_a_break() -> None:
    assert render_line("") == "<br>"


def test_render_document(tmp_path: Path) -> None:
    _write(tmp_path / "post.md", "# T\n\nhi *there*\n- a\n- b\n")

    out = render_document("post", root=tmp_path)

    assert out == "<h1>T</h1><br>hi <em>there</em><br><ul><li>a</li></ul><ul><li>b</li></ul>"


def test_render_document_handles_crlf(tmp_path: Path) -> None:
    (tmp_path / "win.md").write_bytes(b"# T\r\nx\r\n")
    assert render_document("win", root=tmp_path) == "<h1>T</h1>x<br>"


def test_render_document_nested_slug_and_extension(tmp_path: Path) -> None:
    _write(tmp_path / "posts" / "2024" / "first.markdown", "## Hi\n")
    assert render_document("posts/2024/first", root=tmp_path, extension=".markdown") == (
        "<h2>Hi</h2>"
    )


def test_render_document_missing_slug(tmp_path: Path) -> None:
    with pytest.raises(SlugNotFoundError) as excinfo:
        render_document("nope", root=tmp_path)
    assert excinfo.value.slug == "nope"


def test_render_document_directory_is_not_a_document(tmp_path: Path) -> None:
    (tmp_path / "folder.md").mkdir()
    with pytest.raises(SlugNotFoundError):
        render_document("folder", root=tmp_path)


def test_render_document_lone_carriage_return_stays_in_line(tmp_path: Path) -> None:
    (tmp_path / "cr.md").write_bytes(b"a\rb\nc\r\n")
    assert render_document("cr", root=tmp_path) == "a\rb<br>c<br>"


def test_render_document_replaces_undecodable_bytes(tmp_path: Path) -> None:
    (tmp_path / "bad.md").write_bytes(b"# ok\nx\xffy\n")
    assert render_document("bad", root=tmp_path) == "<h1>ok</h1>x�y<br>"


def test_render_document_unreadable_is_read_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "locked.md").write_text("x\n", encoding="utf-8")

    def deny(self: Path, *args: object, **kwargs: object) -> None:
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "open", deny)
    with pytest.raises(ContentReadError) as excinfo:
        render_document("locked", root=tmp_path)
    assert excinfo.value.path == tmp_path / "locked.md"
