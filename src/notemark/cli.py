"""CLI for notemark - structural editing of markdown notes."""

import argparse
import json
import platform
import sys
from pathlib import Path
from typing import Any, Callable

from . import __version__
from .core.model import PARAGRAPH_TYPES, TASK_STATUSES
from .runtime import Runtime, build_runtime

POSITIONS = ["start", "end", "after-heading", "at-line", "in-section"]


def _report(
    args: argparse.Namespace,
    result: dict[str, Any],
    render: Callable[[dict[str, Any]], None] | None = None,
) -> int:
    """Print a tool result and turn it into an exit code."""
    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False))
    elif not result.get("success"):
        print(f"Error: {result.get('error')}", file=sys.stderr)
    elif not args.quiet:
        if render:
            render(result)
        elif "message" in result:
            print(result["message"])
    return 0 if result.get("success") else 1


def _print_lines(items: list[dict[str, Any]]) -> None:
    for item in items:
        print(f"{item['line']:>4}  {item['type']:<9}  {item['raw']}")


def cmd_paragraphs(args: argparse.Namespace, rt: Runtime) -> int:
    """Show classified lines of a note."""
    result = rt.tools.get_paragraphs(
        args.filename,
        start_line=args.start,
        end_line=args.end,
        offset=args.offset,
        limit=args.limit,
    )

    def render(r: dict[str, Any]) -> None:
        _print_lines(r["lines"])
        if r["has_more"]:
            print(f"... more lines, continue with --offset {r['next_cursor']}")

    return _report(args, result, render)


def cmd_search(args: argparse.Namespace, rt: Runtime) -> int:
    """Search lines of a note."""
    result = rt.tools.search_paragraphs(args.filename, args.query, types=args.type)
    return _report(args, result, lambda r: _print_lines(r["matches"]))


def cmd_tasks(args: argparse.Namespace, rt: Runtime) -> int:
    """List tasks of a note."""
    result = rt.tools.list_tasks(args.filename, status=args.status)

    def render(r: dict[str, Any]) -> None:
        for t in r["tasks"]:
            print(f"{t['line_index']:>4}  [{t['status']:<9}]  {t['content']}")

    return _report(args, result, render)


def cmd_add_task(args: argparse.Namespace, rt: Runtime) -> int:
    """Add a task."""
    result = rt.tools.add_task(
        args.filename,
        args.text,
        position=args.position,
        heading=args.heading,
        status=args.status,
        priority=args.priority,
        indent_level=args.indent,
    )
    return _report(args, result)


def cmd_complete(args: argparse.Namespace, rt: Runtime) -> int:
    """Mark a task done."""
    result = rt.tools.complete_task(args.filename, args.line_index)
    return _report(args, result, lambda r: print(r["line"]))


def cmd_update_task(args: argparse.Namespace, rt: Runtime) -> int:
    """Change task text and/or status."""
    result = rt.tools.update_task(
        args.filename, args.line_index, text=args.text, status=args.status
    )
    return _report(args, result, lambda r: print(r["line"]))


def cmd_insert(args: argparse.Namespace, rt: Runtime) -> int:
    """Insert content at a position."""
    result = rt.tools.insert(
        args.filename,
        args.text,
        args.position,
        heading=args.heading,
        line=args.line,
        type=args.type,
    )
    return _report(args, result)


def _preview(key: str) -> Callable[[dict[str, Any]], None]:
    def render(r: dict[str, Any]) -> None:
        for ln in r[key]:
            print(ln)

    return render


def cmd_delete(args: argparse.Namespace, rt: Runtime) -> int:
    """Delete a range of content lines."""
    result = rt.tools.delete_lines(
        args.filename, args.start_line, args.end_line, dry_run=args.dry_run
    )
    return _report(args, result, _preview("lines_to_delete") if args.dry_run else None)


def cmd_replace(args: argparse.Namespace, rt: Runtime) -> int:
    """Replace a range of content lines."""
    result = rt.tools.replace_lines(
        args.filename, args.start_line, args.end_line, args.text, dry_run=args.dry_run
    )
    return _report(args, result, _preview("lines_to_replace") if args.dry_run else None)


def cmd_edit_line(args: argparse.Namespace, rt: Runtime) -> int:
    """Replace one content line."""
    result = rt.tools.edit_line(
        args.filename, args.line, args.text, allow_empty=args.allow_empty
    )
    return _report(args, result)


def cmd_meta_show(args: argparse.Namespace, rt: Runtime) -> int:
    """Pretty-print frontmatter for a note."""
    import yaml

    def render(r: dict[str, Any]) -> None:
        if r["frontmatter"]:
            print(yaml.dump(r["frontmatter"], sort_keys=False, allow_unicode=True), end="")
        else:
            print("# No frontmatter")

    return _report(args, rt.tools.get_properties(args.filename), render)


def cmd_meta_set(args: argparse.Namespace, rt: Runtime) -> int:
    """Set a frontmatter property."""
    return _report(args, rt.tools.set_property(args.filename, args.key, args.value))


def cmd_meta_unset(args: argparse.Namespace, rt: Runtime) -> int:
    """Remove a frontmatter property."""
    return _report(args, rt.tools.remove_property(args.filename, args.key))


def cmd_serve(args: argparse.Namespace, rt: Runtime) -> int:
    """Start local JSON API server."""
    try:
        import uvicorn

        from .api.app import create_app, generate_token
    except ImportError as e:
        print(
            "Error: API dependencies not installed. "
            "Install with: pip install notemark[api]",
            file=sys.stderr,
        )
        print(f"Details: {e}", file=sys.stderr)
        return 1

    token_arg = args.token
    if token_arg == "auto":
        token = generate_token()
        print(f"Generated bearer token: {token}")
        print(f"Use in requests: Authorization: Bearer {token}")
    elif token_arg == "none":
        print("Warning: Running without authentication. Only use in trusted environments.")
        token = None
    else:
        token = token_arg

    app = create_app(rt, token=token, enable_cors=args.cors)

    host = args.host or rt.config.server.host
    port = args.port or rt.config.server.port
    print(f"Starting server on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="info")
    return 0


def _version_text() -> str:
    return (
        f"notemark {__version__} "
        f"(python {platform.python_version()}, platform {platform.system().lower()})"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notemark", description="Structural editing of markdown notes"
    )
    parser.add_argument("--version", action="version", version=_version_text())
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/notemark.toml, root/notemark.toml)",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Notes directory (overrides config)",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Minimize output")
    parser.add_argument("--json", action="store_true", help="Machine-readable output")

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    p = subparsers.add_parser("paragraphs", help="Show classified lines of a note")
    p.add_argument("filename")
    p.add_argument("--start", type=int, default=None, help="First content line (1-indexed)")
    p.add_argument("--end", type=int, default=None, help="Last content line (inclusive)")
    p.add_argument("--offset", type=int, default=0)
    p.add_argument("--limit", type=int, default=200)

    p = subparsers.add_parser("search", help="Search lines of a note")
    p.add_argument("filename")
    p.add_argument("query")
    p.add_argument(
        "--type", action="append", choices=PARAGRAPH_TYPES, help="Restrict to paragraph type"
    )

    p = subparsers.add_parser("tasks", help="List tasks of a note")
    p.add_argument("filename")
    p.add_argument("--status", action="append", choices=TASK_STATUSES)

    p = subparsers.add_parser("add-task", help="Add a task")
    p.add_argument("filename")
    p.add_argument("text")
    p.add_argument("--position", choices=POSITIONS, default="end")
    p.add_argument("--heading", default=None, help="Section heading or **bold** marker")
    p.add_argument("--status", choices=TASK_STATUSES, default=None)
    p.add_argument("--priority", type=int, choices=[1, 2, 3], default=None)
    p.add_argument("--indent", type=int, default=None)

    p = subparsers.add_parser("complete", help="Mark a task done")
    p.add_argument("filename")
    p.add_argument("line_index", type=int, help="Physical line index (0-based)")

    p = subparsers.add_parser("update-task", help="Change task text and/or status")
    p.add_argument("filename")
    p.add_argument("line_index", type=int, help="Physical line index (0-based)")
    p.add_argument("--text", default=None)
    p.add_argument("--status", choices=TASK_STATUSES, default=None)

    p = subparsers.add_parser("insert", help="Insert content at a position")
    p.add_argument("filename")
    p.add_argument("text")
    p.add_argument("--position", choices=POSITIONS, required=True)
    p.add_argument("--heading", default=None)
    p.add_argument("--line", type=int, default=None, help="Content line (1-indexed)")
    p.add_argument("--type", choices=PARAGRAPH_TYPES, default=None)

    p = subparsers.add_parser("delete", help="Delete content lines (inclusive)")
    p.add_argument("filename")
    p.add_argument("start_line", type=int)
    p.add_argument("end_line", type=int)
    p.add_argument("--dry-run", action="store_true", help="Show lines without deleting")

    p = subparsers.add_parser("replace", help="Replace content lines (inclusive)")
    p.add_argument("filename")
    p.add_argument("start_line", type=int)
    p.add_argument("end_line", type=int)
    p.add_argument("text")
    p.add_argument("--dry-run", action="store_true", help="Show lines without replacing")

    p = subparsers.add_parser("edit-line", help="Replace one content line")
    p.add_argument("filename")
    p.add_argument("line", type=int)
    p.add_argument("text")
    p.add_argument("--allow-empty", action="store_true")

    parser_meta = subparsers.add_parser("meta", help="Manage frontmatter")
    meta_sub = parser_meta.add_subparsers(dest="meta_cmd", required=True)
    p = meta_sub.add_parser("show", help="Pretty-print frontmatter")
    p.add_argument("filename")
    p = meta_sub.add_parser("set", help="Set a property")
    p.add_argument("filename")
    p.add_argument("key")
    p.add_argument("value")
    p = meta_sub.add_parser("unset", help="Remove a property")
    p.add_argument("filename")
    p.add_argument("key")

    p = subparsers.add_parser("serve", help="Start local JSON API server")
    p.add_argument("--host", default=None)
    p.add_argument("--port", type=int, default=None)
    p.add_argument(
        "--token", default="auto", help="Bearer token, 'auto' to generate or 'none'"
    )
    p.add_argument("--cors", action="store_true", help="Enable CORS")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # A CLI invocation is its own confirmation; only the server hands out tokens
    rt = build_runtime(
        root=args.root, config_path=args.config, guarded=args.cmd == "serve"
    )

    handlers = {
        "paragraphs": cmd_paragraphs,
        "search": cmd_search,
        "tasks": cmd_tasks,
        "add-task": cmd_add_task,
        "complete": cmd_complete,
        "update-task": cmd_update_task,
        "insert": cmd_insert,
        "delete": cmd_delete,
        "replace": cmd_replace,
        "edit-line": cmd_edit_line,
        "serve": cmd_serve,
    }

    if args.cmd == "meta":
        meta_handlers = {
            "show": cmd_meta_show,
            "set": cmd_meta_set,
            "unset": cmd_meta_unset,
        }
        handler = meta_handlers.get(args.meta_cmd)
    else:
        handler = handlers.get(args.cmd)

    if handler:
        try:
            exit_code = handler(args, rt)
            sys.exit(exit_code)
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
