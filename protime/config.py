"""Load runtime settings from the project .env file and the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from protime.exceptions import ConfigError

logger = logging.getLogger(__name__)


def project_root(package_file: Path | None = None) -> Path:
    """The source checkout holding pyproject.toml, or the working directory.

    A regular (non-editable) install puts the package in site-packages, where
    neither .env nor the browser profile belong.
    """
    source_root = Path(package_file or __file__).resolve().parent.parent
    if (source_root / "pyproject.toml").exists():
        return source_root
    return Path.cwd()


ROOT_DIR = project_root()
ENV_FILE = ROOT_DIR / ".env"

# Browser profile kept between runs so the login session survives
DEFAULT_USER_DATA_DIR = ROOT_DIR / ".user_data"
DEFAULT_SCREENSHOTS_DIR = ROOT_DIR / "screenshots"


def load_env(env_file: Path | None = None) -> None:
    """Load the .env file without overriding variables already exported."""
    path = env_file or ENV_FILE
    if env_file is None and not path.exists():
        found = find_dotenv(usecwd=True)
        if found:
            path = Path(found)
    if path.exists():
        load_dotenv(path)
        logger.debug(f"Loaded environment from {path}")
    else:
        logger.debug(f"No .env file at {path}, using process environment only")


def resolve_path(value: str, default: Path) -> Path:
    """Expand ~ and anchor relative paths on ROOT_DIR. Blank means default."""
    if not value:
        return default
    path = Path(value).expanduser()
    return path if path.is_absolute() else ROOT_DIR / path


def normalize_url(url: str | None) -> str | None:
    """Strip whitespace and trailing slashes. Blank values become None."""
    if url is None:
        return None
    url = url.strip().rstrip("/")
    return url or None


@dataclass
class Settings:
    base_url: str
    email: str = ""
    password: str = ""
    user_data_dir: Path = DEFAULT_USER_DATA_DIR
    screenshots_dir: Path = DEFAULT_SCREENSHOTS_DIR

    @property
    def has_credentials(self) -> bool:
        return bool(self.email) and bool(self.password)

    @property
    def calendar_url(self) -> str:
        return f"{self.base_url}/calendar/person/me"


def load_settings() -> Settings:
    """Build Settings from the environment.

    Raises:
        ConfigError: PROTIME_URL is missing or blank.
    """
    base_url = normalize_url(os.getenv("PROTIME_URL"))
    if not base_url:
        raise ConfigError("Missing PROTIME_URL in .env (e.g. https://trescal.myprotime.eu)")

    user_data_dir = os.getenv("PROTIME_USER_DATA_DIR", "").strip()
    screenshots_dir = os.getenv("PROTIME_SCREENSHOTS_DIR", "").strip()

    return Settings(
        base_url=base_url,
        email=os.getenv("USER_EMAIL", "").strip(),
        password=os.getenv("USER_PASSWORD", ""),
        user_data_dir=resolve_path(user_data_dir, DEFAULT_USER_DATA_DIR),
        screenshots_dir=resolve_path(screenshots_dir, DEFAULT_SCREENSHOTS_DIR),
    )
