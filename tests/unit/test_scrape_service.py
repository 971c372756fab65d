"""Unit tests for scrape pass orchestration."""

import pytest

from club_ratings.config import settings
from club_ratings.services import scrape_service
from club_ratings.services.scrape_service import (
    ScrapeInProgressError,
    is_scrape_running,
    run_scrape,
)
from tests.helpers import FakeBrowser, FakePage, read_fixture

CELJE_URL = "https://www.sofascore.com/football/match/nk-celje-nk-maribor/abcDef"
BRAVO_URL = "https://www.sofascore.com/football/match/nk-bravo-nk-maribor/xyzUvw"


@pytest.fixture
def scrape_settings(tmp_path):
    return settings.model_copy(
        update={"take_screenshots": False, "screenshots_dir": tmp_path / "shots"}
    )


@pytest.fixture
def fake_browser():
    stats = read_fixture("player_stats.html")
    return FakeBrowser(
        {
            settings.club_team_url: FakePage(
                title="NK Maribor football team - SofaScore",
                html=read_fixture("team_page.html"),
            ),
            CELJE_URL: FakePage(
                title="NK Maribor vs NK Celje live score | SofaScore",
                html=read_fixture("match_page.html"),
                tabs={"Lineups": stats, "Player statistics": stats, "General": stats},
            ),
            BRAVO_URL: FakePage(
                title="NK Bravo vs NK Maribor live score | SofaScore",
                html=read_fixture("match_no_ratings.html"),
            ),
        }
    )


def test_run_scrape_replaces_stored_games(game_store, scrape_settings, fake_browser):
    games = run_scrape(game_store, scrape_settings, browser_factory=lambda s: fake_browser)

    assert [g.id for g in games] == ["abcDef", "xyzUvw"]
    assert [g.id for g in game_store.load()] == ["abcDef", "xyzUvw"]
    assert fake_browser.closed is True
    assert is_scrape_running() is False


def test_run_scrape_saves_empty_result(game_store, scrape_settings):
    """A run that finds nothing still overwrites the previous collection."""
    browser = FakeBrowser(
        {settings.club_team_url: FakePage(title="NK Maribor", html="<html><body></body></html>")}
    )

    games = run_scrape(game_store, scrape_settings, browser_factory=lambda s: browser)

    assert games == []
    assert game_store.load() == []


def test_failed_run_keeps_previous_games(game_store, scrape_settings):
    browser = FakeBrowser({})

    with pytest.raises(RuntimeError):
        run_scrape(game_store, scrape_settings, browser_factory=lambda s: browser)

    assert [g.id for g in game_store.load()] == ["abcDef", "xyzUvw", "ghiJkl"]
    assert is_scrape_running() is False


def test_concurrent_run_is_rejected(game_store, scrape_settings, fake_browser):
    scrape_service._scrape_lock.acquire()
    try:
        assert is_scrape_running() is True
        with pytest.raises(ScrapeInProgressError):
            run_scrape(game_store, scrape_settings, browser_factory=lambda s: fake_browser)
    finally:
        scrape_service._scrape_lock.release()

    assert fake_browser.visits == []
    assert len(game_store.load()) == 3


def test_browser_factory_receives_settings(game_store, scrape_settings, fake_browser):
    seen = []

    def factory(s):
        seen.append(s)
        return fake_browser

    run_scrape(game_store, scrape_settings, browser_factory=factory)

    assert seen == [scrape_settings]
