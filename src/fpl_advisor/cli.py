"""Command-line interface for the FPL advisor."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence

from .advisor.orchestrator import FPLAdvisor, build_advisor, error_payload
from .advisor.report import render_markdown
from .config import Settings
from .errors import AdvisorError
from .server import run_server

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fpl-advisor",
        description="Personalised FPL gameweek advice from league data and an LLM",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    advise_parser = subparsers.add_parser(
        "advise",
        help="Fetch data and print advice for one team",
    )
    advise_parser.add_argument(
        "--team-id",
        default=None,
        help="FPL team ID (default: FPL_TEAM_ID from the environment)",
    )
    advise_parser.add_argument(
        "--free-transfers",
        "-ft",
        type=int,
        default=None,
        choices=range(0, 6),
        help="Number of free transfers available next gameweek (0-5)",
    )
    advise_parser.add_argument(
        "--format",
        choices=("json", "markdown"),
        default="markdown",
        help="Output format (default: markdown)",
    )
    advise_parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve the advice endpoint over HTTP",
    )
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8080, help="Bind port")
    serve_parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    return parser


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _run_advise(args: argparse.Namespace, advisor: FPLAdvisor) -> int:
    try:
        envelope = asyncio.run(
            advisor.advise(free_transfers=args.free_transfers, team_id=args.team_id)
        )
    except AdvisorError as exc:
        print(json.dumps(error_payload(exc), indent=2), file=sys.stderr)
        return 1
    except Exception as exc:
        logger.exception("Unexpected error in FPL advice request")
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.format == "json":
        print(json.dumps(envelope.to_payload(), indent=2, ensure_ascii=False))
    else:
        print(render_markdown(envelope))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        advisor = build_advisor(Settings.from_env())
    except AdvisorError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.command == "advise":
        return _run_advise(args, advisor)
    if args.command == "serve":
        run_server(advisor, host=args.host, port=args.port)
        return 0
    parser.error(f"Unknown command {args.command}")
    return 1


if __name__ == "__main__":  # pragma: no cover - entry point
    raise SystemExit(main())
