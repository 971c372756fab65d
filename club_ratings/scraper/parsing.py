"""HTML heuristics for the match pages.

Everything here works on page HTML captured from the browser, so the
heuristics can be exercised against saved pages without a browser.
The third-party markup changes often; these passes are best effort.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Sequence, Tuple
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag

from club_ratings.models.fields import MAX_RATING, MIN_RATING, POSITION_CODES, Position
from club_ratings.models.games import PlayerEntry

# ------------------------------
# Patterns
# ------------------------------
_FIXTURE_DATE_RE = re.compile(r"(\d{2})/(\d{2})/(\d{2})")
_SCORE_RE = re.compile(r"^\d+\s*[-:]\s*\d+$")
_RATING_RE = re.compile(r"^(\d\.\d)$")
_RATING_ANYWHERE_RE = re.compile(r"\d\.\d")
_MINUTES_RE = re.compile(r"^(\d+)'?$")
_POSITION_CODE_RE = re.compile(r"^[NFSMOVDG]$")
_PLAYER_NAME_RE = re.compile(r"^[A-Za-zÀ-ž\s\-.']+$")
_SPACEY_RE = re.compile(r"\s+")

PLAYER_OF_THE_MATCH_PHRASES = ("player of the match", "igralec tekme", "najbolji igralec")
RATING_CONTEXT_WORDS = ("rating", "ocena")

MIN_ROW_TEXT = 20
MIN_STATS_TABLE_RATINGS = 8
MIN_DISTRIBUTION_RATINGS = 6
STARTER_MINUTES = 45


@dataclass
class FixtureLink:
    url: str
    teams: str
    date: date


@dataclass
class RatingDetection:
    has_ratings: bool
    player_of_match_text: bool
    ratings_count: int
    has_stats_table: bool
    ratings: List[float] = field(default_factory=list)

    def summary(self, sample_size: int = 5) -> str:
        sample = ", ".join(f"{r:.1f}" for r in self.ratings[:sample_size])
        return (
            f"player of the match text: {'yes' if self.player_of_match_text else 'no'}; "
            f"{self.ratings_count} ratings (sample: {sample or 'none'}); "
            f"stats table: {'yes' if self.has_stats_table else 'no'}"
        )


# ------------------------------
# Helpers
# ------------------------------

def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def text_content(el: Tag) -> str:
    """Trimmed text of an element and all its descendants."""
    return el.get_text().strip()


def clean_player_name(name: str) -> str:
    return _SPACEY_RE.sub(" ", name.strip())


def parse_rating(text: Optional[str]) -> Optional[float]:
    """Return a rating for an exact ``D.D`` string inside the rating scale."""
    if not text:
        return None
    m = _RATING_RE.match(text.strip())
    if not m:
        return None
    value = float(m.group(1))
    if MIN_RATING <= value <= MAX_RATING:
        return value
    return None


def generate_game_id(url: str) -> str:
    path = urlparse(url).path
    parts = [p for p in path.split("/") if p]
    if parts:
        return parts[-1]
    return str(int(datetime.now().timestamp() * 1000))


def _has_class_fragment(tag: Tag, fragments: Sequence[str]) -> bool:
    classes = tag.get("class") or []
    return any(fragment in cls for cls in classes for fragment in fragments)


# ------------------------------
# Team page: finished fixtures
# ------------------------------

def parse_fixture_links(
    html: str,
    base_url: str,
    cutoff: date,
    today: Optional[date] = None,
) -> List[FixtureLink]:
    """Find finished matches played between ``cutoff`` and ``today``.

    A match link counts when its surrounding event/match container shows
    a DD/MM/YY date and the "FT" marker.
    """
    today = today or date.today()
    soup = _soup(html)
    found: dict[str, FixtureLink] = {}

    for link in soup.select('a[href*="/match/"]'):
        href = link.get("href")
        if not href:
            continue
        if _has_class_fragment(link, ("event", "match")):
            container: Optional[Tag] = link
        else:
            container = link.find_parent(
                lambda t: isinstance(t, Tag) and _has_class_fragment(t, ("event", "match"))
            )
        if container is None:
            continue

        full_text = container.get_text(" ")
        m = _FIXTURE_DATE_RE.search(full_text)
        if not m:
            continue
        day, month, year = (int(g) for g in m.groups())
        try:
            game_date = date(2000 + year, month, day)
        except ValueError:
            continue
        if "FT" not in full_text or not cutoff <= game_date <= today:
            continue

        url = urljoin(base_url, str(href))
        if url not in found:
            found[url] = FixtureLink(url=url, teams=text_content(link), date=game_date)

    return sorted(found.values(), key=lambda f: f.date, reverse=True)


# ------------------------------
# Match page: header and rating detection
# ------------------------------

def parse_match_header(title: str, html: str) -> Tuple[str, str, str]:
    """Return (home_team, away_team, score) for a match page."""
    home_team, away_team, score = "Unknown", "Unknown", "0-0"

    if title and " vs " in title:
        home, away = title.split(" vs ", 1)
        home_team = home.strip()
        away_team = away.split(" live score")[0].split(" |")[0].strip()

    for el in _soup(html).find_all(True):
        text = text_content(el)
        if text and len(text) <= 10 and _SCORE_RE.match(text):
            score = text
            break

    return home_team, away_team, score


def _in_player_context(el: Tag) -> bool:
    parent = el.parent if isinstance(el.parent, Tag) else None
    grand_parent = (
        parent.parent if parent is not None and isinstance(parent.parent, Tag) else None
    )
    ancestors = [
        t for t in (parent, grand_parent)
        if t is not None and not isinstance(t, BeautifulSoup)
    ]
    context = " ".join(text_content(t) for t in ancestors).lower()
    if any(word in context for word in RATING_CONTEXT_WORDS):
        return True
    if any(t.find("img") is not None for t in ancestors):
        return True
    return len(context) > 50


def detect_ratings(html: str) -> RatingDetection:
    """Decide whether the page carries reliable per-player ratings.

    Requires either a "player of the match" mention backed by a full
    stats table, or a spread of ratings that looks like real player data.
    """
    soup = _soup(html)
    ratings: List[float] = []
    for el in soup.find_all(True):
        rating = parse_rating(text_content(el))
        if rating is not None and _in_player_context(el):
            ratings.append(rating)

    body = soup.body or soup
    page_text = body.get_text().lower()
    has_potm_text = any(phrase in page_text for phrase in PLAYER_OF_THE_MATCH_PHRASES)
    has_stats_table = len(ratings) >= MIN_STATS_TABLE_RATINGS
    has_good_distribution = (
        len(ratings) >= MIN_DISTRIBUTION_RATINGS
        and any(r >= 7.5 for r in ratings)
        and any(r <= 7.0 for r in ratings)
    )
    return RatingDetection(
        has_ratings=(has_potm_text and has_stats_table) or has_good_distribution,
        player_of_match_text=has_potm_text,
        ratings_count=len(ratings),
        has_stats_table=has_stats_table,
        ratings=ratings,
    )


# ------------------------------
# Player statistics table
# ------------------------------

def _is_club_row(row: Tag, club_markers: Sequence[str]) -> bool:
    markers = [m.lower() for m in club_markers if m]
    for img in row.find_all("img"):
        src = str(img.get("src") or "").lower()
        alt = str(img.get("alt") or "").lower()
        if any(marker in src or marker in alt for marker in markers):
            return True
    return False


def _row_player_name(cells: List[Tag]) -> Optional[str]:
    for cell in cells[:3]:
        text = text_content(cell)
        if (
            2 < len(text) < 40
            and _PLAYER_NAME_RE.match(text)
            and not text[0].isdigit()
        ):
            return clean_player_name(text)
    return None


def _row_minutes_and_position(cells: List[Tag]) -> Tuple[int, Position]:
    minutes = 0
    position = Position.unknown
    for cell in cells:
        text = text_content(cell)
        m = _MINUTES_RE.match(text)
        if m:
            value = int(m.group(1))
            if 1 <= value <= 120:
                minutes = value
        if _POSITION_CODE_RE.match(text):
            position = POSITION_CODES[text]
    return minutes, position


def parse_player_row(row: Tag, club_markers: Sequence[str]) -> Optional[PlayerEntry]:
    """Extract a club player from one statistics row, or None."""
    row_text = text_content(row)
    if len(row_text) < MIN_ROW_TEXT or not _RATING_ANYWHERE_RE.search(row_text):
        return None
    if not _is_club_row(row, club_markers):
        return None

    cells = row.select("td, div, span")
    name = _row_player_name(cells)
    if not name:
        return None

    rating = next(
        (r for r in (parse_rating(text_content(c)) for c in cells) if r is not None),
        None,
    )
    if rating is None:
        return None

    minutes, position = _row_minutes_and_position(cells)
    return PlayerEntry(
        name=name,
        rating=rating,
        position=position,
        minutes_played=minutes,
        is_starting_xi=minutes >= STARTER_MINUTES,
    )


def extract_club_players(html: str, club_markers: Sequence[str]) -> List[PlayerEntry]:
    """Extract the tracked club's players from the player statistics table.

    Rows are identified as the club's by its logo next to the player.
    Each name is kept once; the result is sorted by rating, highest first.
    """
    soup = _soup(html)
    players: dict[str, PlayerEntry] = {}
    for row in soup.select('tr, [class*="row"]'):
        player = parse_player_row(row, club_markers)
        if player is not None and player.name not in players:
            players[player.name] = player
    return sorted(players.values(), key=lambda p: p.rating or 0.0, reverse=True)
