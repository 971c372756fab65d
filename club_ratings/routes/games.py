"""Game API routes.

Provides endpoints for:
- Reading the persisted game collection
- Reading a single game with filtered players
- Triggering a fresh scrape pass
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from club_ratings.models.fields import PlayerFilter
from club_ratings.models.games import Game, ScrapeResult
from club_ratings.services.aggregation_service import filter_players
from club_ratings.services.game_store import GameStore, GameStoreError, get_game_store
from club_ratings.services.scrape_service import ScrapeInProgressError, run_scrape

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["games"])

LOAD_ERROR = {"error": "Failed to load games data"}


@router.get("/games", response_model=List[Game])
async def list_games(
    store: GameStore = Depends(get_game_store),
):
    """Return every persisted game, including games without player ratings."""
    try:
        return store.load()
    except GameStoreError:
        logger.exception("Error reading games data")
        return JSONResponse(status_code=500, content=LOAD_ERROR)


@router.get("/games/{game_id}", response_model=Game)
async def get_game(
    game_id: str,
    player_filter: PlayerFilter = Query(
        default=PlayerFilter.all, description="all, starting or substitutes"
    ),
    store: GameStore = Depends(get_game_store),
):
    """Return one game with its players filtered and sorted for display."""
    try:
        game = store.get(game_id)
    except GameStoreError:
        logger.exception("Error reading games data")
        return JSONResponse(status_code=500, content=LOAD_ERROR)
    if game is None:
        raise HTTPException(status_code=404, detail="Game not found")
    return game.model_copy(update={"players": filter_players(game.players, player_filter)})


@router.post("/scrape", response_model=ScrapeResult)
def trigger_scrape(
    store: GameStore = Depends(get_game_store),
):
    """Run a scrape pass and replace the stored games.

    Declared sync so the blocking browser session runs in the worker
    thread pool rather than on the event loop.
    """
    logger.info("Starting manual scrape...")
    try:
        games = run_scrape(store)
    except ScrapeInProgressError as exc:
        return JSONResponse(status_code=409, content={"error": str(exc)})
    except Exception as exc:
        logger.exception("Scraping error")
        return JSONResponse(
            status_code=500,
            content={"error": "Scraping failed", "details": str(exc)},
        )
    return ScrapeResult(success=True, games_count=len(games))
