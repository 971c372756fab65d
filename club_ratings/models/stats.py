"""Pydantic models for aggregated player statistics and the best formation."""

import datetime as dt
from typing import List, Optional

from pydantic import Field

from club_ratings.models.fields import Position, PositionSort
from club_ratings.models.games import CamelModel


class Appearance(CamelModel):
    opponent: str
    date: dt.date
    rating: Optional[float] = None


class PlayerPositionStat(CamelModel):
    name: str
    position: Position
    ratings: List[Optional[float]] = Field(default_factory=list)
    appearances: List[Appearance] = Field(default_factory=list)
    average_rating: float = 0.0
    best_rating: float = 0.0
    worst_rating: float = 0.0
    games_played: int = 0


class PositionSummary(CamelModel):
    position: Position
    sort_by: PositionSort
    player_count: int
    average_rating: float
    players: List[PlayerPositionStat] = Field(default_factory=list)


class FormationSlot(CamelModel):
    slot: str
    position: Position
    player: Optional[PlayerPositionStat] = None


class FormationResponse(CamelModel):
    slots: List[FormationSlot] = Field(default_factory=list)
    team_average: float = 0.0
    total_games: int = 0
    players_selected: int = 0
    is_complete: bool = False
