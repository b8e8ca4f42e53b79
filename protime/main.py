"""Command-line entry point: `login` and `clock` commands."""

from __future__ import annotations

import argparse
import logging
import sys

from protime import __version__
from protime.browser import BrowserAutomation
from protime.clocking import run_clock
from protime.config import Settings, load_env, load_settings
from protime.exceptions import ConfigError

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    # Suppress verbose driver logging
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("playwright").setLevel(logging.WARNING)


def _save_failure_artifacts(automation: BrowserAutomation, tag: str) -> None:
    try:
        automation.take_screenshot(tag)
        automation.dump_html(tag)
    except Exception as e:
        logger.warning(f"Could not save debug artifacts: {e}")


def cmd_login(settings: Settings, args: argparse.Namespace) -> None:
    """Open a visible browser and sign in, automatically or by hand."""
    automation = BrowserAutomation(settings)
    try:
        # Headful so the user can see, and finish, the login
        automation.init(headless=False)
        automation.goto(settings.base_url)

        if args.manual:
            logger.info("Manual login mode. Please log in in the browser.")
        elif automation.login():
            logger.info("Automated login successful.")
        else:
            logger.info("Automated login failed or already logged in. Please verify manually if needed.")

        logger.info("Finalizing...")
        logger.info("Keep the browser open? (Press Ctrl+C to exit)")
        automation.wait_until_closed()
        logger.info("Browser closed.")
    except KeyboardInterrupt:
        logger.info("Interrupted, closing browser.")
    except Exception as e:
        logger.error(f"Login failed: {e}")
    finally:
        automation.close()


def cmd_clock(settings: Settings, args: argparse.Namespace) -> None:
    """Run the daily clocking, headless unless --headful is given."""
    automation = BrowserAutomation(settings)
    try:
        automation.init(headless=not args.headful)
        plan = run_clock(automation, settings, submit=not args.dry_run)
        logger.info(f"Clocked {plan.label} at {plan.clock_time}")
    except Exception as e:
        logger.error(f"Operation failed: {e}")
        logger.debug("Traceback:", exc_info=True)
        _save_failure_artifacts(automation, "clock_error")
    finally:
        automation.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="protime-clock",
        description="CLI for automating Trescal MyProtime",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--debug", action="store_true", help="Verbose debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    login_parser = subparsers.add_parser(
        "login",
        help="Perform automated login or open browser for manual login",
    )
    login_parser.add_argument(
        "-m", "--manual",
        action="store_true",
        help="Open browser for manual login",
    )
    login_parser.set_defaults(handler=cmd_login)

    clock_parser = subparsers.add_parser(
        "clock",
        help="Run automation on the calendar (automated login if needed)",
    )
    clock_parser.add_argument(
        "--headful",
        action="store_true",
        help="Show the browser window instead of running headless",
    )
    clock_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fill in the clocking form without submitting it",
    )
    clock_parser.set_defaults(handler=cmd_clock)

    return parser


def cli(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    _configure_logging(args.debug)

    load_env()
    try:
        settings = load_settings()
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)

    args.handler(settings, args)


if __name__ == "__main__":
    cli()
