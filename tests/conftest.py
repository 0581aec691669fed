"""Shared fixtures for the Happy Meter test suite."""

import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from happy_meter.api import create_app
from happy_meter.config import Settings
from happy_meter.db import Database
from happy_meter.models import SubmissionRecord
from happy_meter.service import HappyMeterService

# Wednesday; the current week started on Sunday 2026-10-18.
NOW = datetime(2026, 10, 21, 12, 0, tzinfo=timezone.utc)
CRON_SECRET = "cron-secret"
ADMIN_PASSWORD = "admin-pass"
ALL_FIVES = {"q1": 5, "q2": 5, "q3": 5, "q4": 5, "q5": 5}
ALL_ONES = {"q1": 1, "q2": 1, "q3": 1, "q4": 1, "q5": 1}


# ============================================================
# FAKES
# ============================================================

class RecordingMailer:
    def __init__(self):
        self.sent = []

    def send(self, message):
        self.sent.append(message)


class InMemoryDatabase:
    """Implements the same insert/find contract as :class:`Database`."""

    def __init__(self):
        self.records = []

    def insert_submission(self, submission, created_at=None):
        record = SubmissionRecord(
            id=uuid.uuid4().hex,
            name=submission["name"],
            department=submission["department"],
            scores=dict(submission["scores"]),
            feedback=submission.get("feedback") or "",
            created_at=created_at or NOW,
        )
        self.records.append(record)
        return record

    def find_submissions(self, since=None, limit=None):
        indexed = [
            (record.created_at, position, record)
            for position, record in enumerate(self.records)
            if since is None or record.created_at >= since
        ]
        ordered = [record for _, _, record in sorted(indexed, key=lambda item: item[:2], reverse=True)]
        return ordered[:limit] if limit is not None else ordered


class FailingDatabase:
    def __init__(self):
        self.calls = 0

    def insert_submission(self, submission, created_at=None):
        self.calls += 1
        raise sqlite3.OperationalError("database is locked")

    def find_submissions(self, since=None, limit=None):
        self.calls += 1
        raise sqlite3.OperationalError("unable to open database file")


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        cron_secret=CRON_SECRET,
        admin_password=ADMIN_PASSWORD,
        report_recipient="people@example.com",
        database_path=tmp_path / "happy_meter.db",
        report_sender="Happy Meter Bot <noreply@example.com>",
    )


@pytest.fixture
def database(settings: Settings) -> Database:
    return Database(settings.database_path)


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def service(settings, database, mailer) -> HappyMeterService:
    return HappyMeterService(settings, database, mailer, clock=lambda: NOW)


@pytest.fixture
def client(settings, service) -> TestClient:
    return TestClient(create_app(settings, service=service))


@pytest.fixture
def make_record():
    """Build a SubmissionRecord without touching a store."""

    def factory(scores, department="Finance", created_at=NOW, name="Jane Doe", feedback=""):
        return SubmissionRecord(
            id=uuid.uuid4().hex,
            name=name,
            department=department,
            scores=scores,
            feedback=feedback,
            created_at=created_at,
        )

    return factory
