"""Pytest fixtures: sample games, a temp-file game store and an API client."""

from datetime import date, datetime, timezone
from pathlib import Path
from typing import AsyncGenerator, List

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from club_ratings.models.fields import Position
from club_ratings.models.games import Game
from club_ratings.services.game_store import GameStore
from tests.helpers import player

SCRAPED_AT = datetime(2025, 8, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_games() -> List[Game]:
    """Three games, newest first; the middle one has no ratings."""
    return [
        Game(
            id="abcDef",
            url="https://www.sofascore.com/football/match/nk-celje-nk-maribor/abcDef",
            date=date(2025, 8, 10),
            home_team="NK Maribor",
            away_team="NK Celje",
            score="2 - 1",
            players=[
                player("Ažbe Jug", 7.0, Position.goalkeeper),
                player("Martin Milec", 8.3, Position.defender),
                player("Jan Repas", 7.5, Position.midfielder),
                player("Marcel Lorber", 6.6, Position.forward, minutes=23),
            ],
            has_ratings=True,
            scraped_at=SCRAPED_AT,
        ),
        Game(
            id="xyzUvw",
            url="https://www.sofascore.com/football/match/nk-bravo-nk-maribor/xyzUvw",
            date=date(2025, 8, 2),
            home_team="NK Bravo",
            away_team="NK Maribor",
            score="0 - 0",
            players=[],
            has_ratings=False,
            scraped_at=SCRAPED_AT,
        ),
        Game(
            id="ghiJkl",
            url="https://www.sofascore.com/football/match/nk-koper-nk-maribor/ghiJkl",
            date=date(2025, 7, 27),
            home_team="NK Maribor",
            away_team="NK Koper",
            score="3 - 0",
            players=[
                player("Ažbe Jug", 7.5, Position.goalkeeper),
                player("Martin Milec", 7.2, Position.defender),
                player("Jan Repas", 8.0, Position.forward),
                player("Marcel Lorber", 7.2, Position.forward),
            ],
            has_ratings=True,
            scraped_at=SCRAPED_AT,
        ),
    ]


@pytest.fixture
def game_store(tmp_path: Path, sample_games: List[Game]) -> GameStore:
    """A game store on a temp file pre-populated with ``sample_games``."""
    store = GameStore(tmp_path / "data" / "games.json")
    store.save(sample_games)
    return store


@pytest_asyncio.fixture()
async def app_client(game_store: GameStore) -> AsyncGenerator[AsyncClient, None]:
    """Provide an HTTP client with the application wired to the temp store."""
    from club_ratings.main import app
    from club_ratings.services.game_store import get_game_store

    app.dependency_overrides[get_game_store] = lambda: game_store
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.pop(get_game_store, None)
