"""Headless Chromium session used by the match scraper.

Wraps a single Playwright page. Pages are driven strictly one at a time.
"""

import logging
import re
from pathlib import Path
from typing import Optional, Pattern, Union

from playwright.sync_api import Browser, BrowserContext, Page, Playwright
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from club_ratings.config import Settings

logger = logging.getLogger(__name__)

COOKIE_BUTTON_RE = re.compile(r"consent|accept|agree", re.IGNORECASE)

LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox", "--disable-dev-shm-usage"]


class ClubBrowser:
    """Context-managed Playwright session.

    Usage:
        with ClubBrowser(settings) as browser:
            browser.goto(url)
            html = browser.content()
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    def __enter__(self) -> "ClubBrowser":
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(
                headless=self.settings.headless,
                args=LAUNCH_ARGS,
            )
            self._context = self._browser.new_context(
                user_agent=self.settings.user_agent,
                viewport={"width": 1366, "height": 768},
                locale="en-US",
            )
            self._context.set_default_timeout(self.settings.navigation_timeout_seconds * 1000)
            self._context.set_default_navigation_timeout(
                self.settings.navigation_timeout_seconds * 1000
            )
            self._page = self._context.new_page()
        except Exception:
            self.close()
            raise
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        for resource in (self._context, self._browser):
            if resource is None:
                continue
            try:
                resource.close()
            except PlaywrightError:
                logger.warning("Failed to close browser resource", exc_info=True)
        if self._playwright is not None:
            self._playwright.stop()
        self._playwright = self._browser = self._context = self._page = None

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("ClubBrowser used outside of its context manager")
        return self._page

    def goto(self, url: str) -> None:
        self.page.goto(url, wait_until="networkidle")

    def accept_cookies(self) -> bool:
        """Click the first consent/accept/agree button, if any."""
        button = self.page.get_by_role("button", name=COOKIE_BUTTON_RE).first
        try:
            if button.count() == 0:
                return False
            button.click(timeout=3000)
        except PlaywrightError:
            logger.debug("Cookie button not clickable", exc_info=True)
            return False
        return True

    def click_text(self, pattern: Union[str, Pattern[str]]) -> bool:
        """Click the first element whose text matches ``pattern``."""
        if isinstance(pattern, str):
            pattern = re.compile(pattern, re.IGNORECASE)
        target = self.page.get_by_text(pattern).first
        try:
            if target.count() == 0:
                return False
            target.click(timeout=5000)
        except PlaywrightError:
            logger.debug(f"Click on {pattern.pattern!r} failed", exc_info=True)
            return False
        return True

    def scroll_to_bottom(self) -> None:
        self.page.evaluate("window.scrollTo(0, document.body.scrollHeight)")

    def wait(self, seconds: float) -> None:
        self.page.wait_for_timeout(seconds * 1000)

    def title(self) -> str:
        return self.page.title()

    def content(self) -> str:
        return self.page.content()

    def screenshot(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        self.page.screenshot(path=str(path))
