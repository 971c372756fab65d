"""
Main entry point for FastAPI application.
"""
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from club_ratings.routes import games, stats, ui
from club_ratings.services.aggregation_service import rating_band
from club_ratings.services.scrape_service import is_scrape_running

from club_ratings.logging_config import setup_logging
from club_ratings.config import settings

import logging
logger = logging.getLogger(__name__)

setup_logging(
    level=settings.log_level,
    access_log=settings.access_log,
    scrape_log=settings.scrape_log,
)

PACKAGE_DIR = Path(__file__).resolve().parent


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Tracking {settings.club_name}; games file: {settings.data_path}")
    settings.data_path.parent.mkdir(parents=True, exist_ok=True)
    if settings.take_screenshots:
        settings.screenshots_dir.mkdir(parents=True, exist_ok=True)

    yield

    logger.info("Shutting down.")

templates = Jinja2Templates(directory=str(PACKAGE_DIR / "templates"))
templates.env.filters["rating_band"] = rating_band

# load in app details
app = FastAPI(title=f"{settings.club_name} Player Ratings", lifespan=lifespan)
app.mount("/static", StaticFiles(directory=str(PACKAGE_DIR / "static")), name="static")
app.state.templates = templates
app.include_router(games.router)
app.include_router(stats.router)
app.include_router(ui.router)

@app.get("/health")
async def health_check():
    """Health Check Endpoint, also reports whether a scrape pass is running"""
    return {"status": "ok", "scrapeRunning": is_scrape_running()}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=3000)
