"""CLI entrypoints for gradlegraph commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Tuple

from .config import load_config
from .errors import ConfigError, GradleGraphError
from .logging import configure_logging, get_logger
from .models import AnalysisProgress
from .orchestrator import AnalysisOrchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gradlegraph",
        description="Map Gradle project dependencies of a public GitHub repository.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a .gradlegraph.yml file or the directory holding it.",
    )
    parser.add_argument(
        "--trace-requests",
        action="store_true",
        help="Log every GitHub API request and retry decision.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Fetch build files at one commit and print the project graph as JSON.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    analyze_parser.add_argument("repository", help="Repository as OWNER/REPO.")
    analyze_parser.add_argument(
        "--ref",
        default=None,
        help="Branch or tag to analyze (defaults to the repository's default branch).",
    )
    analyze_parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation for the printed graph.",
    )

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service.")
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def split_repository(value: str) -> Tuple[str, str]:
    """Split ``owner/repo`` into its two parts."""
    parts = [part for part in value.strip().strip("/").split("/") if part]
    if len(parts) != 2:
        raise ValueError(f"Expected OWNER/REPO, got '{value}'")
    owner, repo = parts
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    return owner, repo


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for gradlegraph commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        trace_requests=args.trace_requests,
        log_file=args.log_file,
    )
    logger = get_logger("cli")

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "analyze":
        try:
            owner, repo = split_repository(args.repository)
        except ValueError as exc:
            parser.error(str(exc))

        def _progress(event: AnalysisProgress) -> None:
            logger.debug("[%s] %s %s", event.stage, event.message, event.detail or "")

        orchestrator = AnalysisOrchestrator(config)
        try:
            result = orchestrator.run(owner, repo, args.ref, on_progress=_progress)
        except GradleGraphError as exc:
            parser.exit(1, f"{exc.kind.value}: {exc.message}\n")
        print(json.dumps(result.to_dict(), indent=args.indent))
    elif args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port, config=config)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
