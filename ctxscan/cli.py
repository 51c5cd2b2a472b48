"""CLI entrypoints for ctxscan commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .context import ContextBuilder, extract_keywords, render_project_description
from .logging import configure_logging
from .models import structure_as_dict
from .project_analyzer import ProjectAnalyzer
from .search import CodeSearch, InvalidPatternError


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )


def _add_json_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit machine-readable JSON instead of text.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ctxscan",
        description="Classify source trees and rank files by relevance to a query.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only report warnings and errors.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write DEBUG logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    classify_parser = subparsers.add_parser(
        "classify",
        help="Detect the project type and summarise the project.",
    )
    _add_verbose_option(classify_parser, suppress_default=True)
    _add_path_argument(classify_parser)
    _add_json_option(classify_parser)

    search_parser = subparsers.add_parser(
        "search",
        help="Rank files by relevance to the given keywords.",
    )
    _add_verbose_option(search_parser, suppress_default=True)
    search_parser.add_argument("path", help="Path to the project root.")
    search_parser.add_argument("query", nargs="+", help="Keywords to rank files against.")
    search_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Show at most this many files.",
    )
    search_parser.add_argument(
        "--split",
        action="store_true",
        help="Extract keywords from the query the way `context` does.",
    )
    _add_json_option(search_parser)

    grep_parser = subparsers.add_parser(
        "grep",
        help="List every line matching a regular expression.",
    )
    _add_verbose_option(grep_parser, suppress_default=True)
    grep_parser.add_argument("path", help="Path to the project root.")
    grep_parser.add_argument("pattern", help="Regular expression to match per line.")
    _add_json_option(grep_parser)

    context_parser = subparsers.add_parser(
        "context",
        help="Render the context payload for a natural-language query.",
    )
    _add_verbose_option(context_parser, suppress_default=True)
    context_parser.add_argument("path", help="Path to the project root.")
    context_parser.add_argument("query", nargs="+", help="Natural-language request.")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def _relativize(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


def _run_classify(args: argparse.Namespace) -> None:
    structure = ProjectAnalyzer(load_config(Path(args.path))).analyze_project_structure(args.path)
    if args.json:
        print(json.dumps(structure_as_dict(structure), indent=2))
    else:
        print(render_project_description(structure), end="")


def _run_search(args: argparse.Namespace) -> None:
    root = Path(args.path).expanduser().resolve()
    keywords = extract_keywords(" ".join(args.query)) if args.split else list(args.query)
    ranked = CodeSearch(load_config(root)).rank_files(root, keywords)
    if args.limit is not None:
        ranked = ranked[: max(args.limit, 0)]
    if args.json:
        payload = [
            {"path": _relativize(item.path, root), "score": item.score} for item in ranked
        ]
        print(json.dumps(payload, indent=2))
        return
    if not ranked:
        print("No relevant files found")
        return
    for item in ranked:
        print(f"{item.score:>6}  {_relativize(item.path, root)}")


def _run_grep(args: argparse.Namespace) -> None:
    root = Path(args.path).expanduser().resolve()
    results = CodeSearch(load_config(root)).search_in_files(root, args.pattern)
    if args.json:
        payload = [
            {
                "path": _relativize(result.file_path, root),
                "line": result.line_number,
                "text": result.line_content,
            }
            for result in results
        ]
        print(json.dumps(payload, indent=2))
        return
    for result in results:
        print(f"{_relativize(result.file_path, root)}:{result.line_number}:{result.line_content}")


def _run_context(args: argparse.Namespace) -> None:
    root = Path(args.path).expanduser().resolve()
    builder = ContextBuilder(load_config(root))
    print(builder.gather_context(root, " ".join(args.query)), end="")


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for ctxscan commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose), quiet=args.quiet, log_file=args.log_file
    )

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    handlers = {
        "classify": _run_classify,
        "search": _run_search,
        "grep": _run_grep,
        "context": _run_context,
    }
    handler = handlers.get(args.command)
    if handler is None:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")

    try:
        handler(args)
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")
    except InvalidPatternError as exc:
        parser.exit(1, f"{exc}\n")
    except ConfigError as exc:
        parser.exit(1, f"ctxscan {args.command} failed: {exc}\n")


if __name__ == "__main__":
    main(sys.argv[1:])
