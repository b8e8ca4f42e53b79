from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from protime.browser import BrowserAutomation
from protime.config import Settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        base_url="https://example.myprotime.eu",
        email="jane@example.com",
        password="hunter2",
        user_data_dir=tmp_path / "profile",
        screenshots_dir=tmp_path / "screenshots",
    )


@pytest.fixture
def fake_page() -> MagicMock:
    """Stand-in for a Playwright Page; every call is recorded."""
    page = MagicMock(name="page")
    page.evaluate.return_value = True
    return page


@pytest.fixture
def automation(settings, fake_page) -> BrowserAutomation:
    """A BrowserAutomation that behaves as if init() already ran."""
    automation = BrowserAutomation(settings)
    automation._page = fake_page
    return automation
