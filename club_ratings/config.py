# club_ratings/config.py
from datetime import date
from pathlib import Path
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    env: Literal["dev", "stage", "prod"] = "dev"
    debug: bool = False
    log_level: str = "INFO"
    access_log: bool = True
    scrape_log: Optional[Path] = None  # also write scraper logs to this file

    # Club being tracked
    club_name: str = "NK Maribor"
    base_url: str = "https://www.sofascore.com"
    club_team_url: str = "https://www.sofascore.com/team/football/nk-maribor/2420"
    club_markers: List[str] = ["maribor", "2420"]  # matched against logo src/alt
    cutoff_date: date = date(2025, 7, 15)

    # Storage
    data_path: Path = Path("data/games.json")
    screenshots_dir: Path = Path("screenshots")
    take_screenshots: bool = True

    # Browser / retry behaviour
    headless: bool = True
    max_retries: int = 3
    retry_delay_seconds: float = 2.0
    navigation_timeout_seconds: float = 45.0
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    )

    @property
    def is_dev(self) -> bool:
        return self.env == "dev" or self.debug is True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
