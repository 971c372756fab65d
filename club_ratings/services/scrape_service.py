"""Scrape pass orchestration.

Runs the browser-driven match scraper and replaces the persisted game
collection with the result. Only one pass may run at a time per process.
"""

import logging
import threading
from typing import Callable, List, Optional

from club_ratings.config import Settings, settings as default_settings
from club_ratings.models.games import Game
from club_ratings.scraper.browser import ClubBrowser
from club_ratings.scraper.match_scraper import MatchScraper, ScrapeError
from club_ratings.services.game_store import GameStore

logger = logging.getLogger(__name__)

_scrape_lock = threading.Lock()


class ScrapeInProgressError(ScrapeError):
    """Raised when a scrape is triggered while another is still running."""


def run_scrape(
    store: GameStore,
    settings: Optional[Settings] = None,
    browser_factory: Callable[[Settings], ClubBrowser] = ClubBrowser,
) -> List[Game]:
    """Scrape all qualifying matches and overwrite the game store.

    Args:
        store: Destination for the scraped collection
        settings: Settings to use (defaults to the app settings)
        browser_factory: Builds the browser session; replaced in tests

    Returns:
        The games that were captured and saved

    Raises:
        ScrapeInProgressError: if another pass holds the lock
    """
    settings = settings or default_settings
    if not _scrape_lock.acquire(blocking=False):
        raise ScrapeInProgressError("A scrape is already running")
    try:
        with browser_factory(settings) as browser:
            games = MatchScraper(browser, settings).scrape_games()
        store.save(games)
        logger.info(f"Scrape complete: {len(games)} games captured")
        return games
    finally:
        _scrape_lock.release()


def is_scrape_running() -> bool:
    return _scrape_lock.locked()
