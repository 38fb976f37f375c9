"""Error formatting and actionable hints for mdblog CLI output.

Keep this module small and dependency-light: it is imported by the CLI layer
and only depends on the error hierarchy.
"""

from __future__ import annotations

from mdblog.errors import ContentReadError, MdblogConfigError, SlugNotFoundError


def format_build_failures(failed: dict[str, list[str]]) -> str:
    """Format per-slug export failures into a human-readable stderr summary."""
    if not failed:
        return ""
    lines = [f"Build failed for {len(failed)} page(s):\n"]
    for slug in sorted(failed):
        lines.append(f"  {slug}:")
        for err in failed[slug]:
            lines.append(f"    - {err}")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def format_hint(exc: BaseException) -> str | None:
    """Return an actionable hint for a known error, or None."""
    msg = str(exc)

    if isinstance(exc, MdblogConfigError):
        if "mdblog.toml" in msg and "find" in msg.lower():
            return "run `mdblog init` to create a new project"
        if "content.root" in msg:
            return "create the content directory or fix [content] root in mdblog.toml"
        return None

    if isinstance(exc, SlugNotFoundError):
        return "run `mdblog list` to see the available slugs"

    if isinstance(exc, ContentReadError):
        return f"check that {exc.path} exists and is readable"

    return None


def format_error_with_hint(exc: BaseException) -> str:
    """Format error message + optional hint for stderr output."""
    msg = (str(exc) or repr(exc)).strip()
    result = f"error: {msg}"
    hint = format_hint(exc)
    if hint:
        result += f"\nhint: {hint}"
    return result
