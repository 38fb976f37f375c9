"""MCP server for mdblog: exposes slug listing and rendering as MCP tools.

The server uses FastMCP (optional dependency) for the transport layer.
Core tool functions are plain Python and can be tested without FastMCP installed.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path

from mdblog.config import find_project_root, load_config
from mdblog.errors import MdblogError
from mdblog.library import ContentLibrary

# ---------------------------------------------------------------------------
# Core tool functions (no FastMCP dependency)
# ---------------------------------------------------------------------------


@lru_cache(maxsize=None)
def _library_for(project_root: Path) -> ContentLibrary:
    # One library per project root so its content cache outlives a single call.
    cfg = load_config(root=project_root)
    return ContentLibrary.from_config(cfg, project_root)


def _resolve_library(root: str | None) -> ContentLibrary:
    project_root = Path(root).resolve() if root else find_project_root(Path.cwd())
    return _library_for(project_root)


def _error_envelope(command: str, e: BaseException, **extra: object) -> str:
    return json.dumps({"command": command, "ok": False, "error": str(e), **extra})


def tool_list_slugs(*, root: str | None = None) -> str:
    """List every document slug in the project."""
    try:
        slugs = _resolve_library(root).list_slugs()
    except MdblogError as e:
        return _error_envelope("list", e)
    return json.dumps({"command": "list", "ok": True, "slugs": slugs}, indent=2)


def tool_render(slug: str, *, root: str | None = None) -> str:
    """Render one document to markup."""
    try:
        markup = _resolve_library(root).render_content(slug)
    except MdblogError as e:
        return _error_envelope("render", e, slug=slug, error_type=type(e).__name__)
    return json.dumps({"command": "render", "ok": True, "slug": slug, "markup": markup})


# ---------------------------------------------------------------------------
# FastMCP server factory
# ---------------------------------------------------------------------------


def create_mcp_server():
    """Create and return a FastMCP server with mdblog tools registered.

    Raises ImportError if fastmcp is not installed.
    """
    from fastmcp import FastMCP

    mcp = FastMCP("mdblog", instructions="mdblog Markdown content engine")

    @mcp.tool()
    def mdblog_list_slugs(root: str | None = None) -> str:
        """List every document slug under the content root.

        Returns JSON with a `slugs` list in traversal order.
        """
        return tool_list_slugs(root=root)

    @mcp.tool()
    def mdblog_render(slug: str, root: str | None = None) -> str:
        """Render the document for `slug` to HTML markup.

        Returns JSON with the `markup`, or `ok: false` and an error when the
        slug does not exist or cannot be read.
        """
        return tool_render(slug, root=root)

    return mcp


def run_server(*, root: str | None = None) -> None:
    """Entry point: create and run the MCP server (stdio transport).

    If *root* is provided, changes the working directory to that path so
    that all tools resolve relative to the given project root.
    """
    import os

    if root:
        os.chdir(Path(root).resolve())
    mcp = create_mcp_server()
    mcp.run()
