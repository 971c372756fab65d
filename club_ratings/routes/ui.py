"""UI Routes - Renders Jinja templates for the dashboard."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse

from club_ratings.config import settings
from club_ratings.models.fields import FORMATION_SLOTS, PlayerFilter, Position, PositionSort
from club_ratings.services.aggregation_service import (
    calculate_best_formation,
    calculate_position_data,
    filter_players,
    position_summary,
)
from club_ratings.services.game_store import GameStore, GameStoreError, get_game_store

router = APIRouter()

NAV_LINKS = [
    {"id": "games", "text": "Game View", "url": "/"},
    {"id": "positions", "text": "Position View", "url": "/positions"},
    {"id": "formation", "text": "Best Formation", "url": "/formation"},
]


def _load_games(store: GameStore):
    try:
        return store.load(), None
    except GameStoreError:
        return [], "Failed to load games data"


def _render(request: Request, template: str, active: str, context: dict):
    return request.app.state.templates.TemplateResponse(
        request,
        template,
        {
            "club_name": settings.club_name,
            "nav_links": NAV_LINKS,
            "active_page": active,
            **context,
        },
    )


@router.get("/", response_class=HTMLResponse)
async def game_view(
    request: Request,
    game_id: Optional[str] = Query(None, description="Game to display (defaults to newest)"),
    player_filter: PlayerFilter = Query(PlayerFilter.all),
    store: GameStore = Depends(get_game_store),
):
    """Render one game's player ratings with a game selector."""
    games, error = _load_games(store)
    current = next((g for g in games if g.id == game_id), None)
    if current is None and games:
        current = games[0]
    players = filter_players(current.players, player_filter) if current else []

    return _render(
        request,
        "games.html",
        "games",
        {
            "games": games,
            "current_game": current,
            "players": players,
            "player_filter": player_filter.value,
            "player_filters": [f.value for f in PlayerFilter],
            "error": error,
        },
    )


@router.get("/positions", response_class=HTMLResponse)
async def position_view(
    request: Request,
    position: Position = Query(Position.forward),
    sort_by: PositionSort = Query(PositionSort.rating),
    store: GameStore = Depends(get_game_store),
):
    """Render averages for all players who featured at one position."""
    games, error = _load_games(store)
    summary = position_summary(
        calculate_position_data(games, settings.club_name), position, sort_by
    )
    return _render(
        request,
        "positions.html",
        "positions",
        {
            "summary": summary,
            "positions": [p for p, _ in FORMATION_SLOTS],
            "sort_options": [s.value for s in PositionSort],
            "error": error,
        },
    )


@router.get("/formation", response_class=HTMLResponse)
async def formation_view(
    request: Request,
    store: GameStore = Depends(get_game_store),
):
    """Render the best 4-4-2 on a pitch."""
    games, error = _load_games(store)
    formation = calculate_best_formation(calculate_position_data(games, settings.club_name))
    return _render(
        request,
        "formation.html",
        "formation",
        {
            "formation": formation,
            "slots": {slot.slot: slot for slot in formation.slots},
            "error": error,
        },
    )
