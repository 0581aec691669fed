"""Core orchestration logic for Happy Meter."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol
from zoneinfo import ZoneInfo

from .config import Settings
from .db import Database
from .mailer import Attachment, build_message
from .models import DEPARTMENTS, MAX_SCORE, MIN_SCORE, QUESTION_IDS, SubmissionRecord
from .report import render_csv, render_html, render_text
from .stats import RECENT_LIMIT, RecentCheckIn, StatsSnapshot, compute_stats, recent_checkins

logger = logging.getLogger("happy_meter")

MAX_NAME_LENGTH = 120
MAX_FEEDBACK_LENGTH = 2000
REPORT_WINDOW = timedelta(days=7)
REPORT_FILENAME = "Mood_Report.csv"


class SubmissionError(ValueError):
    """Raised when a check-in payload fails validation."""


class Mailer(Protocol):
    def send(self, message: Any) -> None: ...


@dataclass(slots=True)
class ReportResult:
    status: str
    count: int

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def validate_submission(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a cleaned submission or raise :class:`SubmissionError`."""

    name = payload.get("name") or ""
    if not isinstance(name, str):
        raise SubmissionError("name must be a string")
    name = name.strip()
    if not name:
        raise SubmissionError("name is required")
    if len(name) > MAX_NAME_LENGTH:
        raise SubmissionError(f"name must be at most {MAX_NAME_LENGTH} characters")

    department = payload.get("department")
    if department not in DEPARTMENTS:
        raise SubmissionError(f"unknown department: {department!r}")

    scores = payload.get("scores")
    if not isinstance(scores, Mapping) or not scores:
        raise SubmissionError("scores must be a non-empty mapping of question ids to 1-5")
    cleaned: Dict[str, int] = {}
    for question_id, value in scores.items():
        if question_id not in QUESTION_IDS:
            raise SubmissionError(f"unknown question id: {question_id!r}")
        if isinstance(value, bool) or not isinstance(value, int):
            raise SubmissionError(f"score for {question_id} must be an integer")
        if not MIN_SCORE <= value <= MAX_SCORE:
            raise SubmissionError(f"score for {question_id} must be between {MIN_SCORE} and {MAX_SCORE}")
        cleaned[question_id] = value

    feedback = payload.get("feedback") or ""
    if not isinstance(feedback, str):
        raise SubmissionError("feedback must be a string")
    if len(feedback) > MAX_FEEDBACK_LENGTH:
        raise SubmissionError(f"feedback must be at most {MAX_FEEDBACK_LENGTH} characters")

    return {"name": name, "department": department, "scores": cleaned, "feedback": feedback.strip()}


class HappyMeterService:
    """High-level service behind the HTTP API, the MCP tools and the report job."""

    def __init__(
        self,
        settings: Settings,
        database: Database,
        mailer: Mailer,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self.settings = settings
        self.database = database
        self.mailer = mailer
        self.clock = clock
        self.tz = ZoneInfo(settings.report_timezone)

    # region Intake
    def submit(self, payload: Mapping[str, Any]) -> SubmissionRecord:
        record = self.database.insert_submission(validate_submission(payload))
        logger.info("Recorded check-in %s for %s", record.id, record.department)
        return record

    # endregion

    # region Query helpers
    def get_stats(self) -> StatsSnapshot:
        records = self.database.find_submissions()
        return compute_stats(records, self.clock(), self.tz)

    def get_recent(self, limit: int = RECENT_LIMIT) -> List[RecentCheckIn]:
        return recent_checkins(self.database.find_submissions(limit=limit), self.tz, limit)

    def export_csv(self, days: Optional[int] = None) -> str:
        since = self.clock() - timedelta(days=days) if days else None
        return render_csv(self.database.find_submissions(since=since), self.tz)

    # endregion

    # region Weekly report
    def generate_weekly_report(self, now: Optional[datetime] = None) -> ReportResult:
        now = now or self.clock()
        records = self.database.find_submissions(since=now - REPORT_WINDOW)
        if not records:
            logger.info("Weekly report skipped: no submissions since %s", (now - REPORT_WINDOW).isoformat())
            return ReportResult(status="skipped", count=0)

        # the window spans 8 local days, so keep every trend bucket
        snapshot = compute_stats(records, now, self.tz, trend_days=None)
        local_today = now.astimezone(self.tz).date()
        period = f"{(local_today - REPORT_WINDOW).isoformat()} to {local_today.isoformat()}"
        message = build_message(
            sender=self.settings.report_sender,
            recipient=self.settings.report_recipient,
            subject=f"Happy Meter Weekly Report - {local_today.isoformat()}",
            text=render_text(snapshot, period),
            html=render_html(snapshot, period),
            attachments=(
                Attachment(REPORT_FILENAME, render_csv(records, self.tz).encode("utf-8")),
            ),
        )
        self.mailer.send(message)
        logger.info("Weekly report sent to %s with %s submissions", self.settings.report_recipient, len(records))
        return ReportResult(status="sent", count=len(records))

    # endregion


__all__ = [
    "HappyMeterService",
    "Mailer",
    "ReportResult",
    "SubmissionError",
    "now_utc",
    "validate_submission",
]
