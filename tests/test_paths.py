from pathlib import Path

from mdblog.paths import relpath_to_slug, slug_to_output_relpath, slug_to_relpath


def test_slug_to_relpath() -> None:
    assert slug_to_relpath("post") == Path("post.md")
    assert slug_to_relpath("posts/2024/first") == Path("posts", "2024", "first.md")
    assert slug_to_relpath("intro", ".markdown") == Path("intro.markdown")


def test_relpath_to_slug() -> None:
    assert relpath_to_slug(Path("post.md")) == "post"
    assert relpath_to_slug(Path("posts", "first.md")) == "posts/first"
    assert relpath_to_slug(Path("a.b.md")) == "a.b"


def test_relpath_to_slug_rejects_non_documents() -> None:
    assert relpath_to_slug(Path("image.png")) is None
    assert relpath_to_slug(Path("notes.md.bak")) is None
    assert relpath_to_slug(Path("dir", ".md")) is None


def test_slug_to_output_relpath() -> None:
    assert slug_to_output_relpath("posts/first") == Path("posts", "first.html")
