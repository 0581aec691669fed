"""Tests for environment-driven settings."""

import os
from pathlib import Path

import pytest

from happy_meter.config import load_settings

ENV_KEYS = [
    "DATABASE_PATH",
    "CRON_SECRET",
    "ADMIN_PASSWORD",
    "REPORT_RECIPIENT",
    "REPORT_SENDER",
    "REPORT_TIMEZONE",
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USERNAME",
    "SMTP_PASSWORD",
    "SMTP_USE_TLS",
    "SMTP_TIMEOUT",
    "DB_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield
    # load_dotenv writes to os.environ directly
    for key in ENV_KEYS:
        os.environ.pop(key, None)


def write_env(tmp_path: Path, **values) -> str:
    env_file = tmp_path / ".env"
    env_file.write_text("\n".join(f"{key}={value}" for key, value in values.items()) + "\n")
    return str(env_file)


def test_loads_values_from_env_file(tmp_path):
    env_file = write_env(
        tmp_path,
        CRON_SECRET="cron",
        ADMIN_PASSWORD="admin",
        REPORT_RECIPIENT="hr@example.com",
        DATABASE_PATH=str(tmp_path / "db.sqlite"),
        REPORT_TIMEZONE="Asia/Manila",
        SMTP_PORT="2525",
        SMTP_USE_TLS="false",
    )

    settings = load_settings(env_file)

    assert settings.cron_secret == "cron"
    assert settings.admin_password == "admin"
    assert settings.report_recipient == "hr@example.com"
    assert settings.database_path == tmp_path / "db.sqlite"
    assert settings.report_timezone == "Asia/Manila"
    assert settings.smtp_port == 2525
    assert settings.smtp_use_tls is False
    assert settings.smtp_username is None


def test_defaults_apply_when_optional_values_are_missing(monkeypatch, tmp_path):
    monkeypatch.setenv("CRON_SECRET", "cron")
    monkeypatch.setenv("ADMIN_PASSWORD", "admin")
    monkeypatch.setenv("REPORT_RECIPIENT", "hr@example.com")

    settings = load_settings(write_env(tmp_path))

    assert settings.database_path == Path("happy_meter.db")
    assert settings.report_timezone == "UTC"
    assert settings.smtp_port == 587
    assert settings.smtp_use_tls is True
    assert settings.smtp_timeout == 10.0


@pytest.mark.parametrize("missing", ["CRON_SECRET", "ADMIN_PASSWORD", "REPORT_RECIPIENT"])
def test_missing_required_value_raises(monkeypatch, tmp_path, missing):
    for key in ("CRON_SECRET", "ADMIN_PASSWORD", "REPORT_RECIPIENT"):
        if key != missing:
            monkeypatch.setenv(key, "value")

    with pytest.raises(RuntimeError, match=missing):
        load_settings(write_env(tmp_path))
