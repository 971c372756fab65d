"""Pydantic models for scraped games as persisted and served over the API.

Field names are snake_case in Python and camelCase on the wire, so files
written by earlier versions of the scraper stay readable.
"""

import datetime as dt
import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from club_ratings.models.fields import MAX_RATING, MIN_RATING, Position, round_rating

_LOCALE_DATE_RE = re.compile(r"^\d{1,2}/\d{1,2}/\d{4}$")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PlayerEntry(CamelModel):
    name: str
    rating: Optional[float] = None
    position: Position = Position.unknown
    minutes_played: int = Field(default=0, ge=0)
    is_starting_xi: bool = Field(default=False, alias="isStartingXI")

    @field_validator("rating")
    @classmethod
    def rating_in_scale(cls, v: Optional[float]) -> Optional[float]:
        if v is None:
            return None
        if not MIN_RATING <= v <= MAX_RATING:
            raise ValueError(f"rating must lie in [{MIN_RATING}, {MAX_RATING}]")
        return round_rating(v)


class Game(CamelModel):
    id: str
    url: str
    date: dt.date
    home_team: str = "Unknown"
    away_team: str = "Unknown"
    score: str = "0-0"
    players: List[PlayerEntry] = Field(default_factory=list)
    has_ratings: bool = False
    scraped_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc)
    )

    @field_validator("date", mode="before")
    @classmethod
    def parse_locale_date(cls, v):
        """Accept M/D/YYYY, as written by the earlier scraper, alongside ISO dates."""
        if isinstance(v, str) and _LOCALE_DATE_RE.match(v.strip()):
            return dt.datetime.strptime(v.strip(), "%m/%d/%Y").date()
        return v

    def opponent(self, club_name: str) -> str:
        """Return the team on the other side of the club."""
        return self.home_team if self.away_team == club_name else self.away_team


class ScrapeResult(CamelModel):
    success: bool = True
    games_count: int
