"""Project configuration loading for mdblog.

This module is intentionally small and deterministic: it only reads
`mdblog.toml` and performs light validation/existence checks.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mdblog.errors import MdblogConfigError

CONFIG_FILENAME = "mdblog.toml"


@dataclass(frozen=True)
class ContentConfig:
    root: str
    extension: str


@dataclass(frozen=True)
class BuildConfig:
    out_dir: str
    jobs: int


@dataclass(frozen=True)
class MCPConfig:
    enabled: bool


@dataclass(frozen=True)
class MdblogConfig:
    version: int
    content: ContentConfig
    build: BuildConfig
    mcp: MCPConfig


def render_default_config() -> str:
    """Return the `mdblog.toml` text written by `mdblog init`."""

    return "\n".join(
        [
            "version = 1",
            "",
            "[content]",
            'root = "content"',
            'extension = ".md"',
            "",
            "[build]",
            'out_dir = "site"',
            "jobs = 4",
            "",
            "[mcp]",
            "enabled = true",
            "",
        ]
    )


def find_project_root(start: Path) -> Path:
    """Walk upward from `start` (file or directory) looking for `mdblog.toml`."""

    cur = start
    try:
        if cur.is_file():
            cur = cur.parent
    except OSError:
        cur = cur.parent

    cur = cur.resolve()
    while True:
        if (cur / CONFIG_FILENAME).is_file():
            return cur
        if cur.parent == cur:
            break
        cur = cur.parent

    raise MdblogConfigError(f"Could not find {CONFIG_FILENAME} by walking upward from start path.")


def _as_table(value: Any, *, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise MdblogConfigError(f"Expected [{name}] to be a table.")
    return value


def _as_bool(value: Any, *, name: str) -> bool:
    if not isinstance(value, bool):
        raise MdblogConfigError(f"Expected {name} to be a boolean.")
    return value


def _as_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise MdblogConfigError(f"Expected {name} to be an integer.")
    return value


def _as_str(value: Any, *, name: str) -> str:
    if not isinstance(value, str):
        raise MdblogConfigError(f"Expected {name} to be a string.")
    return value


def load_config(*, root: Path | None = None, config_path: Path | None = None) -> MdblogConfig:
    """Load and validate `mdblog.toml`.

    If neither `root` nor `config_path` are provided, the project root is
    discovered by walking upward from the current working directory.
    """

    if config_path is None:
        if root is None:
            root = find_project_root(Path.cwd())
        config_path = root / CONFIG_FILENAME
    elif root is None:
        root = config_path.parent

    try:
        raw = config_path.read_bytes()
    except FileNotFoundError as e:
        raise MdblogConfigError(f"Missing {CONFIG_FILENAME} at: {config_path}") from e
    except OSError as e:
        raise MdblogConfigError(f"Failed reading config file: {config_path}") from e

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise MdblogConfigError(f"Config is not valid UTF-8: {config_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise MdblogConfigError(f"Invalid TOML in {config_path}: {e}") from e

    version = data.get("version", None)
    if version is None:
        raise MdblogConfigError(f"Missing required `version = 1` in {CONFIG_FILENAME}.")
    version_i = _as_int(version, name="version")
    if version_i != 1:
        raise MdblogConfigError(f"Unsupported config version: {version_i} (expected 1).")

    content_tbl = _as_table(data.get("content"), name="content")
    build_tbl = _as_table(data.get("build"), name="build")
    mcp_tbl = _as_table(data.get("mcp"), name="mcp")

    content_root = _as_str(content_tbl.get("root", "content"), name="content.root")
    extension = _as_str(content_tbl.get("extension", ".md"), name="content.extension")
    out_dir = _as_str(build_tbl.get("out_dir", "site"), name="build.out_dir")
    jobs = _as_int(build_tbl.get("jobs", 4), name="build.jobs")
    mcp_enabled = _as_bool(mcp_tbl.get("enabled", True), name="mcp.enabled")

    # Validation
    if not extension.startswith(".") or len(extension) < 2 or "/" in extension:
        raise MdblogConfigError(
            "Invalid config: content.extension must look like '.md' (a dot plus a suffix)."
        )

    if not (root / content_root).is_dir():
        raise MdblogConfigError(
            "Invalid config: content.root does not exist on disk relative to the project root."
        )

    if jobs < 1:
        raise MdblogConfigError("Invalid config: build.jobs must be >= 1.")

    return MdblogConfig(
        version=version_i,
        content=ContentConfig(root=content_root, extension=extension),
        build=BuildConfig(out_dir=out_dir, jobs=jobs),
        mcp=MCPConfig(enabled=mcp_enabled),
    )
