"""
Contains shared fields and constants used across the models.
"""
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Dict, List, Tuple

MIN_RATING = 5.0
MAX_RATING = 10.0


class Position(str, Enum):
    goalkeeper = "Goalkeeper"
    defender = "Defender"
    midfielder = "Midfielder"
    forward = "Forward"
    unknown = "Unknown"

    @property
    def emoji(self) -> str:
        return {
            "Goalkeeper": "🥅",
            "Defender": "🛡️",
            "Midfielder": "🔄",
            "Forward": "⚡",
            "Unknown": "❔",
        }[self.value]


# Single-letter codes shown in the player statistics table (Slovene and English)
POSITION_CODES: Dict[str, Position] = {
    "N": Position.forward,
    "F": Position.forward,
    "S": Position.midfielder,
    "M": Position.midfielder,
    "O": Position.defender,
    "D": Position.defender,
    "V": Position.goalkeeper,
    "G": Position.goalkeeper,
}

# 4-4-2, in pitch order
FORMATION_SLOTS: List[Tuple[Position, List[str]]] = [
    (Position.goalkeeper, ["GK"]),
    (Position.defender, ["LB", "LCB", "RCB", "RB"]),
    (Position.midfielder, ["LM", "LCM", "RCM", "RM"]),
    (Position.forward, ["LF", "RF"]),
]

# A formation with fewer filled slots is not worth showing
MIN_FORMATION_PLAYERS = 8


class PlayerFilter(str, Enum):
    all = "all"
    starting = "starting"
    substitutes = "substitutes"


class PositionSort(str, Enum):
    rating = "rating"
    games = "games"
    name = "name"


def round_rating(value: float) -> float:
    """Round to one decimal, half-up (7.25 -> 7.3)."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
