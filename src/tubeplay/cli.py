"""Command line entry point: run the API server, the desktop player, or a quick search."""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import replace
from typing import List, Optional

from .config import load_defaults
from .exceptions import SearchError
from .extractor import YouTubeExtractor
from .logs import setup_logging
from .track import Track


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    defaults = load_defaults()
    parser = argparse.ArgumentParser(description="Search and play YouTube music")
    parser.add_argument("--log-level", default=defaults.log_level, help="Loguru level (DEBUG, INFO, ...).")
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the HTTP API server.")
    serve.add_argument("--host", default=defaults.api_host, help="Interface to bind.")
    serve.add_argument("--port", type=int, default=defaults.api_port, help="Port to listen on.")

    gui = commands.add_parser("gui", help="Launch the desktop player.")
    gui.add_argument("--api-url", default=defaults.api_url, help="Base URL of a running API server.")

    search = commands.add_parser("search", help="Search YouTube and print the results.")
    search.add_argument("query", help="Song, artist or video to look for.")
    search.add_argument("--max-results", type=int, default=defaults.page_size, help="How many results to print.")
    search.add_argument("--js-runtime", default=defaults.js_runtime, help="Hint for yt-dlp JS runtime (node, deno, etc.).")
    search.add_argument(
        "--remote-components",
        action="extend",
        nargs="+",
        default=list(defaults.remote_components),
        help="Enable yt-dlp remote components (e.g., ejs:github).",
    )
    return parser.parse_args(argv)


def _print_search_results(query: str, tracks: List[Track]) -> None:
    print(f"Results for '{query}':")
    for position, track in enumerate(tracks, start=1):
        duration = track.duration or "N/A"
        print(f"  {position:>2}. {track.title} - {track.channel} [{duration}] {track.url or ''}".rstrip())
    print(f"Found {len(tracks)} tracks.")


async def _search(args: argparse.Namespace) -> List[Track]:
    extractor = YouTubeExtractor(
        js_runtime=args.js_runtime,
        remote_components=args.remote_components,
    )
    return await asyncio.to_thread(extractor.search, args.query, args.max_results)


def _serve(args: argparse.Namespace) -> None:
    import uvicorn

    from .api import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port, log_level=args.log_level.lower())


def _gui(args: argparse.Namespace) -> None:
    from .ui.main import run_gui

    run_gui(replace(load_defaults(), api_url=args.api_url.rstrip("/"), log_level=args.log_level))


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.command == "gui":
        _gui(args)
        return 0

    setup_logging(args.log_level, load_defaults().log_file)
    if args.command == "serve":
        _serve(args)
        return 0

    try:
        tracks = asyncio.run(_search(args))
    except (SearchError, ValueError) as exc:
        print(f"Search failed: {exc}")
        return 1
    _print_search_results(args.query, tracks)
    return 0


def cli_main() -> None:
    raise SystemExit(main())


__all__ = ["main", "cli_main", "parse_args"]
