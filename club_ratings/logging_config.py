import logging, logging.config
from pathlib import Path
from typing import Optional

SCRAPER_LOGGERS = ("club_ratings.scraper", "club_ratings.services.scrape_service")


def setup_logging(level: str = "INFO", access_log: bool = True, scrape_log: Optional[Path] = None):
    """Configure console logging, plus an optional file for scrape runs.

    When ``scrape_log`` is set the scraper loggers also write to that file,
    rotated at about 1 MB.
    """
    level = level.upper()
    handlers = {
        "console": {"class": "logging.StreamHandler", "formatter": "default"},
        "access":  {"class": "logging.StreamHandler", "formatter": "access_simple"},
    }
    scraper_handlers = ["console"]
    if scrape_log is not None:
        scrape_log.parent.mkdir(parents=True, exist_ok=True)
        handlers["scrape_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "dated",
            "filename": str(scrape_log),
            "maxBytes": 1_000_000,
            "backupCount": 3,
            "encoding": "utf-8",
        }
        scraper_handlers.append("scrape_file")

    loggers = {
        "uvicorn.error":  {"level": level, "handlers": ["console"], "propagate": False},
        "uvicorn.access": {"level": ("INFO" if access_log else "WARNING"),
                           "handlers": ["access"], "propagate": False},
        # Playwright's driver is chatty at DEBUG
        "playwright":     {"level": "WARNING"},
        "asyncio":        {"level": "WARNING"},
    }
    for name in SCRAPER_LOGGERS:
        loggers[name] = {"level": level, "handlers": scraper_handlers, "propagate": False}

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                        "datefmt": "%H:%M:%S"},
            "dated":   {"format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                        "datefmt": "%Y-%m-%d %H:%M:%S"},
            "access_simple": {"format": "%(message)s"},
        },
        "handlers": handlers,
        "loggers": loggers,
        "root": {"level": level, "handlers": ["console"]},
    })
