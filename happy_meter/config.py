"""Configuration helpers for Happy Meter."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

TRUTHY = {"1", "true", "yes", "on"}


@dataclass(slots=True)
class Settings:
    """Runtime configuration values loaded from environment variables."""

    cron_secret: str
    admin_password: str
    report_recipient: str
    database_path: Path
    report_sender: str = "Happy Meter Bot <noreply@localhost>"
    report_timezone: str = "UTC"
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True
    smtp_timeout: float = 10.0
    db_timeout: float = 5.0


def load_settings(env_file: str | None = None) -> Settings:
    """Load settings from the environment, optionally from a specific file."""

    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    db_path = Path(os.getenv("DATABASE_PATH", "happy_meter.db")).expanduser()

    cron_secret = os.getenv("CRON_SECRET")
    admin_password = os.getenv("ADMIN_PASSWORD")
    recipient = os.getenv("REPORT_RECIPIENT")

    if not cron_secret:
        raise RuntimeError("CRON_SECRET must be configured")
    if not admin_password:
        raise RuntimeError("ADMIN_PASSWORD must be configured")
    if not recipient:
        raise RuntimeError("REPORT_RECIPIENT must be configured")

    return Settings(
        cron_secret=cron_secret,
        admin_password=admin_password,
        report_recipient=recipient,
        database_path=db_path,
        report_sender=os.getenv("REPORT_SENDER", "Happy Meter Bot <noreply@localhost>"),
        report_timezone=os.getenv("REPORT_TIMEZONE", "UTC"),
        smtp_host=os.getenv("SMTP_HOST", "localhost"),
        smtp_port=int(os.getenv("SMTP_PORT", "587")),
        smtp_username=os.getenv("SMTP_USERNAME") or None,
        smtp_password=os.getenv("SMTP_PASSWORD") or None,
        smtp_use_tls=os.getenv("SMTP_USE_TLS", "true").strip().lower() in TRUTHY,
        smtp_timeout=float(os.getenv("SMTP_TIMEOUT", "10")),
        db_timeout=float(os.getenv("DB_TIMEOUT", "5")),
    )


__all__ = ["Settings", "load_settings"]
