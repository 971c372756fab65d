"""Sequential scrape of the tracked club's finished matches.

One browser page walks through the team page and then each match page in
turn. A match that keeps failing is skipped; the rest of the run goes on.
"""

import logging
import re
import time
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

from club_ratings.config import Settings
from club_ratings.models.games import Game
from club_ratings.scraper.browser import ClubBrowser
from club_ratings.scraper.parsing import (
    FixtureLink,
    detect_ratings,
    extract_club_players,
    generate_game_id,
    parse_fixture_links,
    parse_match_header,
)

logger = logging.getLogger(__name__)

# Tab labels appear in Slovene or English depending on the session locale
# Whole label only; "all" also appears inside "Football" in the sport nav
RESULTS_TAB_RE = re.compile(r"^\s*(all|results)\s*$", re.IGNORECASE)
LINEUPS_TAB_RE = re.compile(r"postava|lineup", re.IGNORECASE)
PLAYER_STATS_TAB_RE = re.compile(r"statistika igralca|player stat", re.IGNORECASE)
GENERAL_TAB_RE = re.compile(r"splošno|general", re.IGNORECASE)

PAGE_SETTLE_SECONDS = 2.0
TAB_SETTLE_SECONDS = 3.0
FIXTURE_SCROLLS = 3

_FILENAME_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9\-]")


class ScrapeError(Exception):
    """Base class for scraping failures."""


class NavigationError(ScrapeError):
    """A required tab on the match page could not be reached."""


class MatchScraper:
    def __init__(
        self,
        browser: ClubBrowser,
        settings: Settings,
        sleep: Callable[[float], None] = time.sleep,
        today: Optional[date] = None,
    ):
        self.browser = browser
        self.settings = settings
        self.sleep = sleep
        self.today = today

    def scrape_games(self) -> List[Game]:
        """Scrape every qualifying match, newest first."""
        logger.info(f"Opening {self.settings.club_name} team page: {self.settings.club_team_url}")
        self.browser.goto(self.settings.club_team_url)
        if self.browser.accept_cookies():
            logger.info("Cookie popup resolved")
            self.browser.wait(PAGE_SETTLE_SECONDS)

        fixtures = self.get_qualified_fixtures()
        logger.info(
            f"Found {len(fixtures)} finished matches since {self.settings.cutoff_date.isoformat()}"
        )

        games: List[Game] = []
        for index, fixture in enumerate(fixtures, start=1):
            logger.info(f"Match {index}/{len(fixtures)}: {fixture.teams}")
            game = self.scrape_game_with_retries(fixture)
            if game is not None:
                games.append(game)

        for index, game in enumerate(games, start=1):
            logger.info(
                f"  {index}. {game.home_team} vs {game.away_team}: {len(game.players)} players"
            )
        return games

    def get_qualified_fixtures(self) -> List[FixtureLink]:
        if self.browser.click_text(RESULTS_TAB_RE):
            self.browser.wait(PAGE_SETTLE_SECONDS)
        for _ in range(FIXTURE_SCROLLS):
            self.browser.scroll_to_bottom()
            self.browser.wait(1.0)
        return parse_fixture_links(
            self.browser.content(),
            base_url=self.settings.base_url,
            cutoff=self.settings.cutoff_date,
            today=self.today,
        )

    def scrape_game_with_retries(self, fixture: FixtureLink) -> Optional[Game]:
        """Try a match up to ``max_retries`` times, waiting longer each time.

        Returns None once every attempt has failed.
        """
        attempts = max(1, self.settings.max_retries)
        for attempt in range(1, attempts + 1):
            try:
                return self.scrape_game(fixture)
            except Exception as exc:
                logger.warning(f"Attempt {attempt}/{attempts} for {fixture.url} failed: {exc}")
                if attempt < attempts:
                    delay = self.settings.retry_delay_seconds * attempt
                    logger.info(f"Retrying in {delay:.1f}s")
                    self.sleep(delay)

        logger.error(f"All {attempts} attempts failed for {fixture.url}; skipping match")
        return None

    def scrape_game(self, fixture: FixtureLink) -> Game:
        self.browser.goto(fixture.url)
        self.browser.wait(PAGE_SETTLE_SECONDS)

        html = self.browser.content()
        home_team, away_team, score = parse_match_header(self.browser.title(), html)
        game = Game(
            id=generate_game_id(fixture.url),
            url=fixture.url,
            date=fixture.date,
            home_team=home_team,
            away_team=away_team,
            score=score,
        )

        detection = detect_ratings(html)
        logger.info(f"Rating detection: {detection.summary()}")
        if not detection.has_ratings:
            logger.info(f"No reliable player ratings for {home_team} vs {away_team}")
            return game

        self.navigate_to_player_stats()
        self.browser.wait(PAGE_SETTLE_SECONDS)
        self.take_screenshot(game)

        players = extract_club_players(self.browser.content(), self.settings.club_markers)
        logger.info(f"Extracted {len(players)} {self.settings.club_name} players")
        game.players = players
        game.has_ratings = bool(players)
        game.scraped_at = datetime.now(timezone.utc)
        return game

    def navigate_to_player_stats(self) -> None:
        """Open Lineups -> Player statistics -> General.

        Raises:
            NavigationError: when either required tab is missing
        """
        if not self.browser.click_text(LINEUPS_TAB_RE):
            raise NavigationError("Lineups tab not found")
        self.browser.wait(TAB_SETTLE_SECONDS)

        if not self.browser.click_text(PLAYER_STATS_TAB_RE):
            raise NavigationError("Player statistics tab not found")
        self.browser.wait(TAB_SETTLE_SECONDS)

        # General is the default sub-tab on most pages
        self.browser.click_text(GENERAL_TAB_RE)

    def take_screenshot(self, game: Game) -> Optional[Path]:
        if not self.settings.take_screenshots:
            return None
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")
        stem = _FILENAME_UNSAFE_RE.sub("_", f"{game.home_team}-vs-{game.away_team}-{timestamp}")
        path = Path(self.settings.screenshots_dir) / f"{stem}.png"
        try:
            self.browser.screenshot(path)
        except Exception as exc:
            logger.warning(f"Screenshot failed ({path}): {exc}")
            return None
        logger.info(f"Screenshot saved: {path.name}")
        return path
