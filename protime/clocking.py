"""Daily clocking on the MyProtime calendar: optional absence block, then a clock time."""

from __future__ import annotations

import logging
from datetime import datetime

from playwright.sync_api import Page

from protime.browser import BrowserAutomation
from protime.config import Settings
from protime.exceptions import BrowserNotInitializedError, ClockingError
from protime.models import ABSENCE_TYPE, DURATION_TYPE, ClockPlan, plan_clocking

logger = logging.getLogger(__name__)

# =============================================================================
# CSS SELECTORS
# =============================================================================

SELECTORS = {
    # Calendar month view: one cell per day, keyed by ISO date
    "day_cell": '[data-testid="{testid}"]',
    "cell_button": "button",

    # Context menu opened from the cell button
    "context_menu": '[data-testid="context-menu"]',
    "day_details_item": '[data-testid="contextItem_Bekijk dagdetails"]',

    # Day-detail side panel: "+" button opens the request options
    "panel_add_button": '[data-testid="day-detail-options"]',
    "absence_option": '[data-testid="RequestAbsence-option"]',
    "clocking_option": '[data-testid="RequestClocking-option"]',

    # Absence request form
    "absence_definition_select": "#definitionId",
    "duration_type_select": "#durationType",
    "duration_input": "#duration",

    # Clocking request form
    "time_input": "#time",
}

ELEMENT_TIMEOUT = 10000  # ms
PANEL_TIMEOUT = 15000  # ms
TYPING_DELAY = 100  # ms between keystrokes
ABSENCE_SETTLE_MS = 2000
FINAL_PAUSE_MS = 5000

# Picks an <option> by its visible text and fires the events the site's
# form logic listens to. Returns false when no option matches.
_SELECT_BY_TEXT_JS = """([selector, text]) => {
    const select = document.querySelector(selector);
    if (!select) return false;
    const target = Array.from(select.options).find(opt => opt.text.trim() === text);
    if (!target) return false;
    select.value = target.value;
    select.dispatchEvent(new Event('change', { bubbles: true }));
    select.dispatchEvent(new Event('input', { bubbles: true }));
    return true;
}"""


def _select_by_text(page: Page, selector: str, text: str) -> None:
    page.wait_for_selector(selector, timeout=ELEMENT_TIMEOUT)
    if not page.evaluate(_SELECT_BY_TEXT_JS, [selector, text]):
        raise ClockingError(f'Option "{text}" not found in dropdown {selector}')


def _replace_input(page: Page, selector: str, text: str) -> None:
    """Clear an input and type text into it key by key."""
    page.wait_for_selector(selector, timeout=ELEMENT_TIMEOUT)
    # Triple click selects any default value so Backspace clears it
    page.click(selector, click_count=3)
    page.keyboard.press("Backspace")
    logger.info(f"Typing time: {text}")
    page.type(selector, text, delay=TYPING_DELAY)


def _open_day_detail(page: Page, plan: ClockPlan) -> None:
    """Open the day-detail side panel for the plan's day."""
    cell_selector = SELECTORS["day_cell"].format(testid=plan.cell_testid)
    logger.info(f"Looking for current day cell: {cell_selector}")
    page.wait_for_selector(cell_selector, timeout=ELEMENT_TIMEOUT)

    cell = page.query_selector(cell_selector)
    if cell is None:
        raise ClockingError(f"Could not find today's cell ({cell_selector})")
    button = cell.query_selector(SELECTORS["cell_button"])
    if button is None:
        raise ClockingError("Could not find a button inside the cell")

    logger.info("Clicking the button in the calendar cell...")
    button.click()

    logger.info("Waiting for context menu...")
    page.wait_for_selector(SELECTORS["context_menu"], timeout=ELEMENT_TIMEOUT)

    logger.info(f"Clicking menu item: {SELECTORS['day_details_item']}")
    page.wait_for_selector(SELECTORS["day_details_item"], timeout=ELEMENT_TIMEOUT)
    page.click(SELECTORS["day_details_item"])

    # The panel must be open before anything can be added to the day
    logger.info("Waiting for detail panel to open...")
    page.wait_for_selector(SELECTORS["panel_add_button"], timeout=PANEL_TIMEOUT)


def _request_absence(page: Page, automation: BrowserAutomation, duration: str) -> None:
    logger.info(f"First time entry, setting absence ({ABSENCE_TYPE})")

    page.click(SELECTORS["panel_add_button"])

    logger.info(f"Clicking absence request menu item: {SELECTORS['absence_option']}")
    page.wait_for_selector(SELECTORS["absence_option"], timeout=ELEMENT_TIMEOUT)
    page.click(SELECTORS["absence_option"])

    logger.info(f'Selecting "{ABSENCE_TYPE}" from dropdown...')
    _select_by_text(page, SELECTORS["absence_definition_select"], ABSENCE_TYPE)
    _select_by_text(page, SELECTORS["duration_type_select"], DURATION_TYPE)

    _replace_input(page, SELECTORS["duration_input"], duration)

    # First Enter commits the duration field, the second submits the form
    page.keyboard.press("Enter")
    logger.info("Submitting absence request...")
    page.keyboard.press("Enter")
    automation.wait(ABSENCE_SETTLE_MS)


def _request_clocking(page: Page, clock_time: str, submit: bool) -> None:
    logger.info(f"Clicking add item for clocking: {SELECTORS['panel_add_button']}")
    page.wait_for_selector(SELECTORS["panel_add_button"], timeout=ELEMENT_TIMEOUT)
    page.click(SELECTORS["panel_add_button"])

    logger.info(f"Clicking clocking request menu item: {SELECTORS['clocking_option']}")
    page.wait_for_selector(SELECTORS["clocking_option"], timeout=ELEMENT_TIMEOUT)
    page.click(SELECTORS["clocking_option"])

    _replace_input(page, SELECTORS["time_input"], clock_time)

    if submit:
        logger.info("Submitting clocking request...")
        page.keyboard.press("Enter")
    else:
        logger.info("Dry run: leaving the clocking form unsubmitted")


def run_clock(
    automation: BrowserAutomation,
    settings: Settings,
    now: datetime | None = None,
    submit: bool = True,
) -> ClockPlan:
    """Run the daily clocking on an initialized browser session.

    Args:
        automation: Browser session, already init()-ed.
        settings: Loaded settings (base URL and credentials).
        now: Local time to plan for. Defaults to the current time.
        submit: Press Enter on the clocking form. False leaves it filled in.

    Returns:
        The ClockPlan that was carried out.
    """
    logger.info(f"Navigating to {settings.base_url}...")
    automation.goto(settings.calendar_url)

    # Only does something when the stored session has expired
    automation.login()

    page = automation.page
    if page is None:
        raise BrowserNotInitializedError("Failed to open page")
    logger.info("Successfully reached the calendar page.")

    plan = plan_clocking(now or datetime.now())
    logger.info(f"Planned {plan.label} for {plan.day.isoformat()} at {plan.clock_time}")

    _open_day_detail(page, plan)

    if plan.check_in and plan.absence_duration:
        _request_absence(page, automation, plan.absence_duration)

    _request_clocking(page, plan.clock_time, submit)

    logger.info("Automation steps completed successfully.")
    # Leave the final state on screen briefly before the browser closes
    automation.wait(FINAL_PAUSE_MS)
    return plan
