"""Aggregation of player ratings across games.

Provides:
- Per (player, position) rating statistics
- Position views with sorting
- The best 4-4-2 formation by historical average
- Game view player filtering and rating bands
"""

from typing import Dict, Iterable, List, Optional, Tuple

from club_ratings.models.fields import (
    FORMATION_SLOTS,
    MIN_FORMATION_PLAYERS,
    PlayerFilter,
    Position,
    PositionSort,
    round_rating,
)
from club_ratings.models.games import Game, PlayerEntry
from club_ratings.models.stats import (
    Appearance,
    FormationResponse,
    FormationSlot,
    PlayerPositionStat,
    PositionSummary,
)

PositionKey = Tuple[str, Position]


def calculate_position_data(
    games: Iterable[Game],
    club_name: str,
) -> Dict[PositionKey, PlayerPositionStat]:
    """Group every player appearance by (name, position) and compute stats.

    Args:
        games: Persisted games, in collection order
        club_name: Name of the tracked club, used to work out the opponent

    Returns:
        Dict keyed by (name, position), in first-seen order
    """
    data: Dict[PositionKey, PlayerPositionStat] = {}

    for game in games:
        for player in game.players:
            key = (player.name, player.position)
            stat = data.get(key)
            if stat is None:
                stat = PlayerPositionStat(name=player.name, position=player.position)
                data[key] = stat
            stat.ratings.append(player.rating)
            stat.appearances.append(
                Appearance(
                    opponent=game.opponent(club_name),
                    date=game.date,
                    rating=player.rating,
                )
            )

    for stat in data.values():
        valid = [r for r in stat.ratings if r is not None]
        if valid:
            stat.average_rating = round_rating(sum(valid) / len(valid))
            stat.games_played = len(valid)
            stat.best_rating = max(valid)
            stat.worst_rating = min(valid)
        else:
            stat.average_rating = 0.0
            stat.games_played = 0
            stat.best_rating = 0.0
            stat.worst_rating = 0.0

    return data


def _best_position_per_player(
    position_data: Dict[PositionKey, PlayerPositionStat],
) -> List[PlayerPositionStat]:
    best: Dict[str, PlayerPositionStat] = {}
    for stat in position_data.values():
        current = best.get(stat.name)
        # Strictly greater, so ties keep the first position seen
        if current is None or stat.average_rating > current.average_rating:
            best[stat.name] = stat
    return list(best.values())


def calculate_best_formation(
    position_data: Dict[PositionKey, PlayerPositionStat],
) -> FormationResponse:
    """Pick the highest-average players for each 4-4-2 slot.

    Each player is considered once, at the position where their average
    is highest. Players without a valid rating and players at an unknown
    position are never selected.
    """
    by_position: Dict[Position, List[PlayerPositionStat]] = {
        position: [] for position, _ in FORMATION_SLOTS
    }
    for stat in _best_position_per_player(position_data):
        if stat.position in by_position and stat.average_rating > 0:
            by_position[stat.position].append(stat)

    slots: List[FormationSlot] = []
    for position, labels in FORMATION_SLOTS:
        ranked = sorted(by_position[position], key=lambda s: s.average_rating, reverse=True)
        for index, label in enumerate(labels):
            player = ranked[index] if index < len(ranked) else None
            slots.append(FormationSlot(slot=label, position=position, player=player))

    selected = [slot.player for slot in slots if slot.player is not None]
    team_average = (
        round_rating(sum(p.average_rating for p in selected) / len(selected))
        if selected
        else 0.0
    )
    return FormationResponse(
        slots=slots,
        team_average=team_average,
        total_games=sum(p.games_played for p in selected),
        players_selected=len(selected),
        is_complete=len(selected) >= MIN_FORMATION_PLAYERS,
    )


def position_summary(
    position_data: Dict[PositionKey, PlayerPositionStat],
    position: Position,
    sort_by: PositionSort = PositionSort.rating,
) -> PositionSummary:
    """Return the rated players at one position, sorted for display."""
    players = [
        stat
        for stat in position_data.values()
        if stat.position == position and stat.games_played > 0
    ]

    if sort_by == PositionSort.games:
        players.sort(key=lambda s: s.games_played, reverse=True)
    elif sort_by == PositionSort.name:
        players.sort(key=lambda s: s.name.casefold())
    else:
        players.sort(key=lambda s: s.average_rating, reverse=True)

    average = (
        round_rating(sum(p.average_rating for p in players) / len(players))
        if players
        else 0.0
    )
    return PositionSummary(
        position=position,
        sort_by=sort_by,
        player_count=len(players),
        average_rating=average,
        players=players,
    )


def filter_players(
    players: Iterable[PlayerEntry],
    player_filter: PlayerFilter = PlayerFilter.all,
) -> List[PlayerEntry]:
    """Filter a game's players and sort them for the game view.

    Rated players come first by rating (highest first); unrated players
    follow alphabetically.
    """
    if player_filter == PlayerFilter.starting:
        selected = [p for p in players if p.is_starting_xi]
    elif player_filter == PlayerFilter.substitutes:
        selected = [p for p in players if not p.is_starting_xi]
    else:
        selected = list(players)

    rated = sorted((p for p in selected if p.rating), key=lambda p: p.rating, reverse=True)
    unrated = sorted((p for p in selected if not p.rating), key=lambda p: p.name.casefold())
    return rated + unrated


def rating_band(rating: Optional[float]) -> str:
    """Map a rating to its display band."""
    if not rating:
        return "none"
    if rating >= 8.0:
        return "excellent"
    if rating >= 7.0:
        return "good"
    if rating >= 6.0:
        return "average"
    return "poor"
