"""JSON file persistence for scraped games.

The whole collection lives in a single file that is rewritten on every
successful scrape; nothing is merged with earlier runs.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from club_ratings.config import settings
from club_ratings.models.games import Game

logger = logging.getLogger(__name__)

_games_adapter = TypeAdapter(List[Game])


class GameStoreError(Exception):
    """Raised when the persisted games file cannot be read."""


class GameStore:
    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> List[Game]:
        """Return all persisted games, or an empty list before the first scrape."""
        if not self.path.exists():
            logger.info(f"No games file at {self.path}; returning empty collection")
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
            return _games_adapter.validate_json(raw)
        except (OSError, ValidationError) as exc:
            raise GameStoreError(f"Failed to read {self.path}: {exc}") from exc

    def get(self, game_id: str) -> Optional[Game]:
        return next((game for game in self.load() if game.id == game_id), None)

    def save(self, games: List[Game]) -> None:
        """Overwrite the file with ``games``.

        Written to a temp file in the same directory, then renamed over the
        target.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = _games_adapter.dump_python(games, mode="json", by_alias=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=".games-", suffix=".json"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except Exception:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.info(f"Saved {len(games)} games to {self.path}")


def get_game_store() -> GameStore:
    """FastAPI dependency returning the store configured in settings."""
    return GameStore(settings.data_path)
