from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from mdblog.inline import render_inline
from mdblog.library import ContentLibrary
from mdblog.renderer import render_lines


def _package_version() -> str:
    try:
        return version("mdblog")
    except PackageNotFoundError:
        # Running from a source checkout, or otherwise not installed.
        return "0.0.0"


__version__ = _package_version()

__all__ = ["ContentLibrary", "__version__", "render_inline", "render_lines"]
