"""Command-line interface for url-snapshot."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

import httpx
from playwright.sync_api import Error as PlaywrightError
from pydantic import TypeAdapter

from .capture_document import DocumentCapturer
from .capture_page import PageCapturer, open_browser_context
from .classify import ContentProbe
from .config import Settings, get_settings
from .models import DocumentArtifacts, PageArtifacts
from .pipeline import Pipeline
from .shutdown import ShutdownCoordinator
from .state import RunState

logger = logging.getLogger(__name__)

_URLS_ADAPTER = TypeAdapter(List[str])


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    p = argparse.ArgumentParser(
        prog="url-snapshot",
        description="Capture screenshots, HTML and text for a list of URLs.",
    )
    p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    sub = p.add_subparsers(dest="cmd", required=True)

    # --- run ---
    run = sub.add_parser("run", help="Process every URL not yet captured")
    run.add_argument("--urls", type=Path, default=None, help="JSON array of URLs")
    run.add_argument("--out", type=Path, default=None, help="Output directory")
    run.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window instead of running headless",
    )
    run.add_argument(
        "--extension",
        type=Path,
        default=None,
        help="Unpacked browser extension to load (e.g. a cookie-banner blocker)",
    )
    run.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-page rendering deadline in seconds (default: 5)",
    )

    # --- stats ---
    stats = sub.add_parser("stats", help="Summarize the persisted index and failures")
    stats.add_argument("--out", type=Path, default=None, help="Output directory")

    return p


def _configure_logging(verbose: bool) -> None:
    """Set up root logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def load_urls(path: Path) -> List[str]:
    """Read the input file: a JSON array of URL strings.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If it is not a JSON array of strings.
    """
    logger.info("Reading URLs from %s", path)
    urls = _URLS_ADAPTER.validate_json(path.read_bytes())
    logger.info("Found %d URLs to process", len(urls))
    return urls


def _http_client(settings: Settings) -> httpx.Client:
    return httpx.Client(
        timeout=httpx.Timeout(settings.download_timeout, connect=settings.probe_timeout),
        follow_redirects=True,
        headers={"user-agent": settings.user_agent},
    )


def run_snapshot(settings: Settings) -> int:
    """Run the pipeline end to end. Returns the process exit status."""
    try:
        urls = load_urls(settings.urls_file)
        settings.ensure_dirs()
    except (OSError, ValueError) as exc:
        logger.error("Fatal error: %s", exc)
        return 1

    state = RunState.load(settings.out_dir)

    try:
        with ShutdownCoordinator() as shutdown, _http_client(settings) as client:
            with open_browser_context(settings) as context:
                probe = ContentProbe(client, timeout=settings.probe_timeout)
                pipeline = Pipeline(
                    state,
                    probe=probe,
                    pages=PageCapturer(context, settings),
                    documents=DocumentCapturer(client, probe, settings),
                    shutdown=shutdown,
                )
                summary = pipeline.run(urls)
    except PlaywrightError as exc:
        logger.error("Fatal error: %s", exc)
        return 1

    if summary.interrupted:
        logger.info("Script can be safely restarted.")
    print(summary.summary())
    return 0


def show_stats(settings: Settings) -> int:
    state = RunState.load(settings.out_dir)
    artifacts = state.index.values()
    still_failing = {r.url for r in state.ledger if r.url not in state.index}
    print(
        json.dumps(
            {
                "successful": len(state.index),
                "pages": sum(isinstance(a, PageArtifacts) for a in artifacts),
                "documents": sum(isinstance(a, DocumentArtifacts) for a in artifacts),
                "failure_records": len(state.ledger),
                "still_failing": len(still_failing),
            },
            indent=2,
        )
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    if args.cmd == "run":
        settings = get_settings(
            urls_file=args.urls,
            out_dir=args.out,
            navigation_timeout=args.timeout,
            extension_dir=args.extension,
            headless=False if args.headed else None,
        )
        return run_snapshot(settings)

    if args.cmd == "stats":
        return show_stats(get_settings(out_dir=args.out))

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
