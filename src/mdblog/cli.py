from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from mdblog import __version__
from mdblog.config import CONFIG_FILENAME
from mdblog.diagnostics import format_build_failures, format_error_with_hint
from mdblog.errors import ContentReadError, MdblogConfigError, SlugNotFoundError

if TYPE_CHECKING:  # pragma: no cover
    from mdblog.config import MdblogConfig
    from mdblog.library import ContentLibrary


EXIT_OK = 0
EXIT_CONFIG = 2
EXIT_NOT_FOUND = 3
EXIT_CONTENT_ERROR = 4


def _add_common_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--root",
        type=str,
        default=None,
        help=f"Project root (defaults to searching upward from cwd for {CONFIG_FILENAME}).",
    )
    p.add_argument(
        "--config",
        type=str,
        default=None,
        help=f"Path to {CONFIG_FILENAME} (defaults to <root>/{CONFIG_FILENAME}).",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Emit machine-readable JSON on stdout.",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")


def _add_build_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("--out", type=str, default=None, help="Output directory override.")
    p.add_argument("--jobs", type=int, default=None, help="Concurrency override.")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mdblog")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    init_p = subparsers.add_parser("init", help=f"Create {CONFIG_FILENAME} and a content root.")
    _add_common_flags(init_p)
    init_p.add_argument("--force", action="store_true", help=f"Overwrite {CONFIG_FILENAME}.")

    list_p = subparsers.add_parser("list", help="List every document slug.")
    _add_common_flags(list_p)

    render_p = subparsers.add_parser("render", help="Render one document to HTML.")
    _add_common_flags(render_p)
    render_p.add_argument("slug", help="Document slug (path under the content root, no extension).")

    build_p = subparsers.add_parser("build", help="Render every document into the output dir.")
    _add_common_flags(build_p)
    _add_build_flags(build_p)

    watch_p = subparsers.add_parser("watch", help="Build, then rebuild when documents change.")
    _add_common_flags(watch_p)
    _add_build_flags(watch_p)

    mcp_p = subparsers.add_parser("mcp", help="MCP tool server.")
    mcp_sub = mcp_p.add_subparsers(dest="mcp_command", required=True)
    serve_p = mcp_sub.add_parser("serve", help="Serve mdblog tools over stdio.")
    _add_common_flags(serve_p)

    return parser


def parse_args(argv: list[str]) -> argparse.Namespace:
    return _build_parser().parse_args(argv)


def _is_json_mode(args: argparse.Namespace) -> bool:
    return bool(getattr(args, "json_output", False))


def _emit_json(payload: dict[str, object]) -> None:
    print(json.dumps(payload, indent=2))


def _eprint(msg: str) -> None:
    print(msg, file=sys.stderr)


def _report_error(args: argparse.Namespace, e: BaseException) -> None:
    if _is_json_mode(args):
        _emit_json({"command": args.command, "ok": False, "error": str(e)})
    else:
        _eprint(format_error_with_hint(e))


def _configure_logging(args: argparse.Namespace) -> None:
    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _resolve_root_and_config(args: argparse.Namespace) -> tuple[Path | None, Path | None]:
    root = Path(args.root).resolve() if args.root else None
    config_path = Path(args.config).resolve() if args.config else None
    return root, config_path


def _load_config(args: argparse.Namespace) -> tuple[Path, MdblogConfig]:
    from mdblog.config import find_project_root, load_config

    root, config_path = _resolve_root_and_config(args)
    if root is None and config_path is None:
        root = find_project_root(Path.cwd())
    elif root is None and config_path is not None:
        root = config_path.parent

    assert root is not None
    cfg = load_config(root=root, config_path=config_path)
    return root, cfg


def _load_library(args: argparse.Namespace) -> tuple[Path, MdblogConfig, ContentLibrary]:
    from mdblog.library import ContentLibrary

    root, cfg = _load_config(args)
    return root, cfg, ContentLibrary.from_config(cfg, root)


def cmd_init(args: argparse.Namespace) -> int:
    from mdblog.config import render_default_config

    root = Path(args.root).resolve() if args.root else Path.cwd()
    config_path = root / CONFIG_FILENAME
    if config_path.exists() and not bool(args.force):
        _report_error(
            args,
            MdblogConfigError(f"{config_path} already exists (use --force to overwrite)."),
        )
        return EXIT_CONFIG

    content_dir = root / "content"
    try:
        config_path.write_text(render_default_config(), encoding="utf-8")
        content_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        _report_error(args, MdblogConfigError(f"Failed writing {config_path}: {e}"))
        return EXIT_CONFIG

    if _is_json_mode(args):
        _emit_json(
            {
                "command": "init",
                "ok": True,
                "config": str(config_path),
                "content_root": str(content_dir),
            }
        )
    else:
        print(f"Created {config_path}")
    return EXIT_OK


def cmd_list(args: argparse.Namespace) -> int:
    try:
        _, _, library = _load_library(args)
        slugs = library.list_slugs()
    except MdblogConfigError as e:
        _report_error(args, e)
        return EXIT_CONFIG
    except ContentReadError as e:
        _report_error(args, e)
        return EXIT_CONTENT_ERROR

    if _is_json_mode(args):
        _emit_json({"command": "list", "ok": True, "slugs": slugs})
    else:
        for slug in slugs:
            print(slug)
    return EXIT_OK


def cmd_render(args: argparse.Namespace) -> int:
    try:
        _, _, library = _load_library(args)
        markup = library.render_content(args.slug)
    except MdblogConfigError as e:
        _report_error(args, e)
        return EXIT_CONFIG
    except SlugNotFoundError as e:
        _report_error(args, e)
        return EXIT_NOT_FOUND
    except ContentReadError as e:
        _report_error(args, e)
        return EXIT_CONTENT_ERROR

    if _is_json_mode(args):
        _emit_json({"command": "render", "ok": True, "slug": args.slug, "markup": markup})
    else:
        print(markup)
    return EXIT_OK


def cmd_build(args: argparse.Namespace) -> int:
    from mdblog.builder import run_build

    try:
        root, cfg, library = _load_library(args)
        out_dir = Path(args.out).resolve() if args.out else root / cfg.build.out_dir
        jobs = int(args.jobs) if args.jobs is not None else int(cfg.build.jobs)
        report = asyncio.run(run_build(library=library, out_dir=out_dir, jobs=jobs))
    except MdblogConfigError as e:
        _report_error(args, e)
        return EXIT_CONFIG
    except ContentReadError as e:
        _report_error(args, e)
        return EXIT_CONTENT_ERROR

    if _is_json_mode(args):
        _emit_json(
            {
                "command": "build",
                "ok": report.ok,
                "out_dir": str(out_dir),
                "written": sorted(report.written),
                "failed": report.failed,
            }
        )
    else:
        print(f"Wrote {len(report.written)} page(s) to {out_dir}")
        if report.failed:
            _eprint(format_build_failures(report.failed).rstrip())

    return EXIT_OK if report.ok else EXIT_CONTENT_ERROR


def cmd_watch(args: argparse.Namespace) -> int:
    from mdblog.watcher import ContentWatcher, RebuildResult, require_watchfiles, watch_changes

    try:
        require_watchfiles()
    except ImportError as e:
        _report_error(args, e)
        return EXIT_CONFIG

    try:
        root, cfg = _load_config(args)
    except MdblogConfigError as e:
        _report_error(args, e)
        return EXIT_CONFIG

    content_root = (root / cfg.content.root).resolve()
    json_mode = _is_json_mode(args)

    def notify(msg: str) -> None:
        if not json_mode:
            _eprint(msg)

    def on_result(result: RebuildResult) -> None:
        if json_mode:
            print(json.dumps(result.to_json()), flush=True)

    def on_error(exc: BaseException) -> None:
        _eprint(format_error_with_hint(exc))

    # cmd_build() loads a fresh library each time, so edits are re-rendered.
    watcher = ContentWatcher(content_root, cfg.content.extension, lambda: cmd_build(args))
    cmd_build(args)
    notify(f"[watch] watching {content_root}")
    try:
        asyncio.run(
            watcher.run(
                watch_changes(content_root),
                notify=notify,
                on_result=on_result,
                on_error=on_error,
            )
        )
    except KeyboardInterrupt:
        notify("[watch] stopped")
    return EXIT_OK


def cmd_mcp(args: argparse.Namespace) -> int:
    from mdblog.mcp_server import run_server

    try:
        root, cfg = _load_config(args)
    except MdblogConfigError as e:
        _report_error(args, e)
        return EXIT_CONFIG
    if not cfg.mcp.enabled:
        _report_error(
            args,
            MdblogConfigError(f"MCP server is disabled in {CONFIG_FILENAME} ([mcp] enabled = false)."),
        )
        return EXIT_CONFIG

    try:
        run_server(root=str(root))
    except ImportError as e:
        _report_error(args, ImportError(f"fastmcp is required for `mdblog mcp serve` ({e})."))
        return EXIT_CONFIG
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    try:
        args = parse_args(list(sys.argv[1:] if argv is None else argv))
    except SystemExit as e:
        # argparse uses SystemExit for --help/--version and parse errors.
        code = e.code
        return int(code) if isinstance(code, int) else EXIT_CONFIG

    _configure_logging(args)

    if args.command == "init":
        return cmd_init(args)
    if args.command == "list":
        return cmd_list(args)
    if args.command == "render":
        return cmd_render(args)
    if args.command == "build":
        return cmd_build(args)
    if args.command == "watch":
        return cmd_watch(args)
    if args.command == "mcp":
        return cmd_mcp(args)

    return EXIT_CONFIG


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
