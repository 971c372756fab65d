"""Shared test helpers: saved HTML pages, a player factory and a fake browser."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Pattern

from club_ratings.models.fields import Position
from club_ratings.models.games import PlayerEntry

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


def player(name: str, rating, position: Position, minutes: int = 90) -> PlayerEntry:
    return PlayerEntry(
        name=name,
        rating=rating,
        position=position,
        minutes_played=minutes,
        is_starting_xi=minutes >= 45,
    )


@dataclass
class FakePage:
    title: str
    html: str
    # tab label -> page HTML after clicking it
    tabs: Dict[str, str] = field(default_factory=dict)
    # number of goto() calls that time out before the page loads
    failures: int = 0


class FakeBrowser:
    def __init__(self, pages: Dict[str, FakePage], screenshot_error: Optional[Exception] = None):
        self.pages = pages
        self.screenshot_error = screenshot_error
        self.current: Optional[FakePage] = None
        self.html = ""
        self.visits: List[str] = []
        self.clicks: List[str] = []
        self.screenshots: List[Path] = []
        self.closed = False

    def __enter__(self) -> "FakeBrowser":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.closed = True

    def goto(self, url: str) -> None:
        self.visits.append(url)
        page = self.pages.get(url)
        if page is None:
            raise RuntimeError(f"net::ERR_NAME_NOT_RESOLVED at {url}")
        if page.failures > 0:
            page.failures -= 1
            raise RuntimeError(f"Timeout 45000ms exceeded navigating to {url}")
        self.current = page
        self.html = page.html

    def accept_cookies(self) -> bool:
        return False

    def click_text(self, pattern: Pattern[str]) -> bool:
        if self.current is None:
            return False
        for label, html in self.current.tabs.items():
            if pattern.search(label):
                self.clicks.append(label)
                self.html = html
                return True
        return False

    def scroll_to_bottom(self) -> None:
        pass

    def wait(self, seconds: float) -> None:
        pass

    def title(self) -> str:
        return self.current.title if self.current else ""

    def content(self) -> str:
        return self.html

    def screenshot(self, path: Path) -> None:
        if self.screenshot_error is not None:
            raise self.screenshot_error
        self.screenshots.append(path)
