"""Interactive setup script for protime-clock.

Prompts for configuration values, validates them, and writes a .env file.

Usage:
    python scripts/configure.py
"""

import getpass
import sys
from pathlib import Path

ENV_FILE = Path(__file__).parent.parent / ".env"


def _prompt(label: str, default: str = "", secret: bool = False, required: bool = True) -> str:
    """Prompt for a value, showing the label and optional default."""
    display = f"  {label} [{default}]: " if default else f"  {label}: "
    while True:
        value = getpass.getpass(display) if secret else input(display).strip()
        if not value:
            if default:
                return default
            if not required:
                return ""
            print(f"    {label} is required — please enter a value.")
            continue
        return value


def _validate_base_url(url: str) -> str | None:
    """Return the URL without trailing slashes, or None if it is not http(s)."""
    if not url.startswith(("http://", "https://")):
        print("    URL must start with http:// or https://")
        return None
    return url.rstrip("/")


def main() -> None:
    print("=" * 60)
    print("  protime-clock — Interactive Setup")
    print("=" * 60)
    print()

    if ENV_FILE.exists():
        print(f"  Existing .env found at {ENV_FILE}")
        answer = input("  Overwrite it? [y/N] ").strip().lower()
        if answer != "y":
            print("  Aborted.")
            sys.exit(0)
        print()

    config: dict[str, str] = {}

    print("--- MyProtime ---")
    print("  The base URL of your company's MyProtime site,")
    print("  e.g. https://trescal.myprotime.eu")
    while True:
        url = _validate_base_url(_prompt("Base URL"))
        if url:
            config["PROTIME_URL"] = url
            break

    print()
    print("--- Credentials ---")
    print("  Leave both empty to sign in by hand with `protime-clock login --manual`.")
    config["USER_EMAIL"] = _prompt("Email", required=False)
    config["USER_PASSWORD"] = _prompt("Password", secret=True, required=False) if config["USER_EMAIL"] else ""

    print()
    print(f"Writing {ENV_FILE}...")
    lines = [
        "# Generated by scripts/configure.py — edit as needed\n",
        "\n",
        f"PROTIME_URL={config['PROTIME_URL']}\n",
    ]
    if config["USER_EMAIL"]:
        lines += [
            f"USER_EMAIL={config['USER_EMAIL']}\n",
            f"USER_PASSWORD={config['USER_PASSWORD']}\n",
        ]
    else:
        lines += [
            "# USER_EMAIL=\n",
            "# USER_PASSWORD=\n",
        ]
    lines += [
        "\n",
        "# ---- Optional paths ----\n",
        "# PROTIME_USER_DATA_DIR=.user_data\n",
        "# PROTIME_SCREENSHOTS_DIR=screenshots\n",
    ]

    ENV_FILE.write_text("".join(lines), encoding="utf-8")
    print(f"  Written: {ENV_FILE}")

    print()
    print("=" * 60)
    print("  Setup complete! Sign in once, then clock:")
    print("    protime-clock login")
    print("    protime-clock clock")
    print("=" * 60)


if __name__ == "__main__":
    main()
