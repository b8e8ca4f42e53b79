"""Thin wrapper around a Playwright Chromium session with a persistent profile."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from playwright.sync_api import (
    BrowserContext,
    Error as PwError,
    Page,
    Playwright,
    sync_playwright,
)

from protime.config import Settings, normalize_url
from protime.exceptions import BrowserNotInitializedError, ConfigError

logger = logging.getLogger(__name__)

VIEWPORT = {"width": 1280, "height": 800}
LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

LOGIN_SELECTORS = {
    "email_input": "#Email",
    "password_input": "#Password",
}
LOGIN_FORM_TIMEOUT = 10000  # ms


class BrowserAutomation:
    """Owns one browser context for the lifetime of a command."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.user_data_dir: Path = settings.user_data_dir
        self._playwright: Playwright | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    def __enter__(self) -> BrowserAutomation:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def page(self) -> Page | None:
        return self._page

    def _require_page(self) -> Page:
        if self._page is None:
            raise BrowserNotInitializedError("Browser not initialized")
        return self._page

    def init(self, headless: bool = False) -> None:
        """Launch Chromium on the persistent profile directory."""
        self.user_data_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Launching browser (headless={headless}, profile={self.user_data_dir})")

        self._playwright = sync_playwright().start()
        self._context = self._playwright.chromium.launch_persistent_context(
            str(self.user_data_dir),
            headless=headless,
            viewport=VIEWPORT,
            args=LAUNCH_ARGS,
        )
        # A persistent context opens with one blank tab already
        if self._context.pages:
            self._page = self._context.pages[0]
        else:
            self._page = self._context.new_page()

    def goto(self, url: str | None = None) -> None:
        page = self._require_page()
        target = normalize_url(url) or normalize_url(self.settings.base_url)
        if not target:
            raise ConfigError("Missing PROTIME_URL in environment")
        logger.debug(f"Navigating to {target}")
        page.goto(target, wait_until="networkidle")

    def login(self) -> bool:
        """Fill in the sign-in form if it is shown.

        Returns:
            True when credentials were submitted and the next page loaded.
            False when credentials are missing, or the form never appeared
            (usually because the stored session is still logged in).
        """
        page = self._require_page()

        if not self.settings.has_credentials:
            logger.error("Credentials missing in .env file (USER_EMAIL, USER_PASSWORD)")
            return False

        try:
            logger.info("Attempting automated login...")
            page.wait_for_selector(LOGIN_SELECTORS["email_input"], timeout=LOGIN_FORM_TIMEOUT)
            page.type(LOGIN_SELECTORS["email_input"], self.settings.email)
            page.type(LOGIN_SELECTORS["password_input"], self.settings.password)

            # The form has no stable submit button selector, Enter submits it
            with page.expect_navigation(wait_until="networkidle"):
                page.keyboard.press("Enter")
            return True
        except PwError as e:
            logger.info("Login form not found or already logged in.")
            logger.debug(f"Login attempt ended with: {e}")
            return False

    def click(self, selector: str, timeout: float | None = None) -> None:
        page = self._require_page()
        page.wait_for_selector(selector, timeout=timeout)
        page.click(selector)

    def type(self, selector: str, text: str, timeout: float | None = None) -> None:
        page = self._require_page()
        page.wait_for_selector(selector, timeout=timeout)
        page.type(selector, text)

    def wait(self, ms: float) -> None:
        self._require_page().wait_for_timeout(ms)

    def wait_until_closed(self) -> None:
        """Block until the user closes the browser window."""
        self._require_page().wait_for_event("close", timeout=0)

    def take_screenshot(self, name: str) -> Path | None:
        """Save a screenshot for debugging. Returns None if no page is open."""
        if self._page is None:
            return None
        self.settings.screenshots_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        path = self.settings.screenshots_dir / f"{timestamp}_{name}.png"
        self._page.screenshot(path=str(path), full_page=True)
        logger.info(f"Screenshot saved: {path}")
        return path

    def dump_html(self, name: str) -> Path | None:
        """Dump the current page HTML to a file for inspection."""
        if self._page is None:
            return None
        self.settings.screenshots_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        path = self.settings.screenshots_dir / f"{timestamp}_{name}.html"
        path.write_text(self._page.content(), encoding="utf-8")
        logger.info(f"HTML dump saved: {path}")
        return path

    def close(self) -> None:
        try:
            if self._context is not None:
                try:
                    self._context.close()
                except PwError as e:
                    # Already gone when the user closed the window themselves
                    logger.debug(f"Browser context close: {e}")
            if self._playwright is not None:
                try:
                    self._playwright.stop()
                except Exception as e:
                    # The driver may already be down after Ctrl+C
                    logger.warning(f"Could not stop Playwright cleanly: {e}")
        finally:
            self._context = None
            self._playwright = None
            self._page = None
