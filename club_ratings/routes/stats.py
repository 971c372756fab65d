import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from club_ratings.config import settings
from club_ratings.models.fields import Position, PositionSort
from club_ratings.models.stats import FormationResponse, PositionSummary
from club_ratings.routes.games import LOAD_ERROR
from club_ratings.services.aggregation_service import (
    calculate_best_formation,
    calculate_position_data,
    position_summary,
)
from club_ratings.services.game_store import GameStore, GameStoreError, get_game_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["stats"])


@router.get("/positions/{position}", response_model=PositionSummary)
async def get_position_summary(
    position: Position,
    sort_by: PositionSort = Query(default=PositionSort.rating, description="rating, games or name"),
    store: GameStore = Depends(get_game_store),
):
    """Return rated players at a position with their averages across games."""
    try:
        games = store.load()
    except GameStoreError:
        logger.exception("Error reading games data")
        return JSONResponse(status_code=500, content=LOAD_ERROR)
    return position_summary(
        calculate_position_data(games, settings.club_name), position, sort_by
    )


@router.get("/formation", response_model=FormationResponse)
async def get_best_formation(
    store: GameStore = Depends(get_game_store),
):
    """Return the best 4-4-2 by historical average rating."""
    try:
        games = store.load()
    except GameStoreError:
        logger.exception("Error reading games data")
        return JSONResponse(status_code=500, content=LOAD_ERROR)
    return calculate_best_formation(calculate_position_data(games, settings.club_name))
