"""Standalone runner for a scrape pass.

Runs the same scrape as ``POST /api/scrape`` without the web server, so
it can be scheduled or run by hand.

Usage:
    python -m club_ratings.cli.scrape [--no-headless] [--since 2025-07-15]

Exit codes:
    0 - Success
    1 - Failure (check logs for details)
"""

import argparse
import logging
import sys
from datetime import date, datetime, timezone
from pathlib import Path
from typing import List, Optional

from club_ratings.config import settings
from club_ratings.services.game_store import GameStore
from club_ratings.services.scrape_service import run_scrape

logger = logging.getLogger("scrape_runner")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=f"Scrape {settings.club_name} match ratings into the games file"
    )
    parser.add_argument(
        "--since",
        type=date.fromisoformat,
        default=None,
        help=f"Only matches on or after this date (default {settings.cutoff_date.isoformat()})",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help=f"Games JSON file to write (default {settings.data_path})",
    )
    parser.add_argument(
        "--no-headless",
        action="store_true",
        help="Show the browser window while scraping",
    )
    parser.add_argument(
        "--no-screenshots",
        action="store_true",
        help="Skip saving a screenshot of each statistics table",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Run one scrape pass.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    overrides = {}
    if args.since is not None:
        overrides["cutoff_date"] = args.since
    if args.output is not None:
        overrides["data_path"] = args.output
    if args.no_headless:
        overrides["headless"] = False
    if args.no_screenshots:
        overrides["take_screenshots"] = False
    run_settings = settings.model_copy(update=overrides)

    start_time = datetime.now(timezone.utc)
    logger.info(f"Starting scrape for {run_settings.club_name}")
    try:
        games = run_scrape(GameStore(run_settings.data_path), settings=run_settings)
    except Exception as e:
        elapsed = (datetime.now(timezone.utc) - start_time).total_seconds()
        logger.error(f"Scrape failed after {elapsed:.1f}s: {e}", exc_info=True)
        return 1

    elapsed = (datetime.now(timezone.utc) - start_time).total_seconds()
    rated = sum(1 for game in games if game.has_ratings)
    logger.info(
        f"Scrape complete in {elapsed:.1f}s: "
        f"{len(games)} games, {rated} with player ratings"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
