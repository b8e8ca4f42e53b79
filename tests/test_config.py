import os
from pathlib import Path

import pytest

from protime import config
from protime.config import DEFAULT_USER_DATA_DIR, ROOT_DIR, load_env, load_settings, normalize_url, project_root
from protime.exceptions import ConfigError

ENV_VARS = ("PROTIME_URL", "USER_EMAIL", "USER_PASSWORD", "PROTIME_USER_DATA_DIR", "PROTIME_SCREENSHOTS_DIR")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv first so monkeypatch restores the original state afterwards
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_normalize_url_strips_trailing_slashes():
    assert normalize_url("https://trescal.myprotime.eu///") == "https://trescal.myprotime.eu"
    assert normalize_url("  https://trescal.myprotime.eu/ ") == "https://trescal.myprotime.eu"


def test_normalize_url_blank_is_none():
    assert normalize_url(None) is None
    assert normalize_url("") is None
    assert normalize_url(" / ") is None


def test_missing_url_raises():
    with pytest.raises(ConfigError, match="PROTIME_URL"):
        load_settings()


def test_blank_url_raises(monkeypatch):
    monkeypatch.setenv("PROTIME_URL", "   ")

    with pytest.raises(ConfigError):
        load_settings()


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("PROTIME_URL", "https://trescal.myprotime.eu/")
    monkeypatch.setenv("USER_EMAIL", "jane@example.com")
    monkeypatch.setenv("USER_PASSWORD", "hunter2")

    settings = load_settings()

    assert settings.base_url == "https://trescal.myprotime.eu"
    assert settings.calendar_url == "https://trescal.myprotime.eu/calendar/person/me"
    assert settings.has_credentials is True
    assert settings.user_data_dir == DEFAULT_USER_DATA_DIR


def test_credentials_need_both_values(monkeypatch):
    monkeypatch.setenv("PROTIME_URL", "https://trescal.myprotime.eu")
    monkeypatch.setenv("USER_EMAIL", "jane@example.com")

    assert load_settings().has_credentials is False


def test_path_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("PROTIME_URL", "https://trescal.myprotime.eu")
    monkeypatch.setenv("PROTIME_USER_DATA_DIR", str(tmp_path / "profile"))
    monkeypatch.setenv("PROTIME_SCREENSHOTS_DIR", str(tmp_path / "shots"))

    settings = load_settings()

    assert settings.user_data_dir == tmp_path / "profile"
    assert settings.screenshots_dir == tmp_path / "shots"


def test_load_env_keeps_exported_values(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("PROTIME_URL=https://from-file.example\nUSER_EMAIL=file@example.com\n", encoding="utf-8")
    monkeypatch.setenv("PROTIME_URL", "https://from-shell.example")

    load_env(env_file)

    assert os.environ["PROTIME_URL"] == "https://from-shell.example"
    assert os.environ["USER_EMAIL"] == "file@example.com"


def test_load_env_without_file_is_noop(tmp_path):
    load_env(Path(tmp_path / "missing.env"))

    assert "PROTIME_URL" not in os.environ


def test_relative_path_overrides_anchor_on_project_root(monkeypatch):
    monkeypatch.setenv("PROTIME_URL", "https://trescal.myprotime.eu")
    monkeypatch.setenv("PROTIME_USER_DATA_DIR", ".user_data")
    monkeypatch.setenv("PROTIME_SCREENSHOTS_DIR", "out/screenshots")

    settings = load_settings()

    assert settings.user_data_dir == ROOT_DIR / ".user_data" == DEFAULT_USER_DATA_DIR
    assert settings.screenshots_dir == ROOT_DIR / "out" / "screenshots"


def test_project_root_is_source_checkout(tmp_path):
    (tmp_path / "pyproject.toml").write_text("[project]\n", encoding="utf-8")
    package_file = tmp_path / "protime" / "config.py"

    assert project_root(package_file) == tmp_path.resolve()


def test_project_root_outside_checkout_is_cwd(monkeypatch, tmp_path):
    installed = tmp_path / "site-packages" / "protime" / "config.py"
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    assert project_root(installed) == workdir.resolve()


def test_load_env_falls_back_to_cwd_env_file(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "ENV_FILE", tmp_path / "installed" / ".env")
    workdir = tmp_path / "work"
    workdir.mkdir()
    (workdir / ".env").write_text("PROTIME_URL=https://from-cwd.example\n", encoding="utf-8")
    monkeypatch.chdir(workdir)

    load_env()

    assert os.environ["PROTIME_URL"] == "https://from-cwd.example"
