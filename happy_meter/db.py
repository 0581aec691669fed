"""SQLite persistence layer for Happy Meter submissions."""

from __future__ import annotations

import json
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from .models import SubmissionRecord

Connection = sqlite3.Connection
Row = sqlite3.Row


class Database:
    """Append-only store of check-in submissions."""

    def __init__(self, path: Path, timeout: float = 5.0) -> None:
        self._path = path
        self._timeout = timeout
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize()

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        conn = sqlite3.connect(self._path, timeout=self._timeout)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def _initialize(self) -> None:
        with self.connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS submissions (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    name TEXT NOT NULL,
                    department TEXT NOT NULL,
                    scores TEXT NOT NULL,
                    feedback TEXT NOT NULL DEFAULT '',
                    created_at TEXT NOT NULL
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_submissions_created_at ON submissions (created_at)"
            )
            conn.commit()

    def insert_submission(
        self, submission: Dict[str, Any], created_at: Optional[datetime] = None
    ) -> SubmissionRecord:
        """Persist a submission, assigning its id and creation time (now unless given)."""

        record = SubmissionRecord(
            id=uuid.uuid4().hex,
            name=submission["name"],
            department=submission["department"],
            scores=dict(submission["scores"]),
            feedback=submission.get("feedback") or "",
            created_at=(created_at or datetime.now(timezone.utc)).astimezone(timezone.utc),
        )
        with self.connect() as conn:
            conn.execute(
                """
                INSERT INTO submissions (id, name, department, scores, feedback, created_at)
                VALUES (:id, :name, :department, :scores, :feedback, :created_at)
                """,
                {
                    "id": record.id,
                    "name": record.name,
                    "department": record.department,
                    "scores": json.dumps(record.scores, sort_keys=True),
                    "feedback": record.feedback,
                    "created_at": record.created_at.isoformat(timespec="microseconds"),
                },
            )
            conn.commit()
        return record

    def find_submissions(
        self, since: Optional[datetime] = None, limit: Optional[int] = None
    ) -> List[SubmissionRecord]:
        """Return submissions newest first, optionally bounded by creation time."""

        query = "SELECT * FROM submissions"
        params: List[Any] = []
        if since is not None:
            query += " WHERE created_at >= ?"
            params.append(since.astimezone(timezone.utc).isoformat(timespec="microseconds"))
        query += " ORDER BY created_at DESC, seq DESC"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        with self.connect() as conn:
            cursor = conn.execute(query, params)
            return [row_to_record(row) for row in cursor.fetchall()]


def row_to_record(row: Row) -> SubmissionRecord:
    """Decode a stored row; undecodable rows raise :class:`sqlite3.DataError`."""

    try:
        raw_scores = json.loads(row["scores"] or "{}")
        return SubmissionRecord(
            id=row["id"],
            name=row["name"],
            department=row["department"],
            scores={key: int(value) for key, value in raw_scores.items()},
            feedback=row["feedback"] or "",
            created_at=datetime.fromisoformat(row["created_at"]),
        )
    except (ValueError, TypeError, AttributeError) as exc:
        raise sqlite3.DataError(f"Malformed submission row {row['id']}: {exc}") from exc


__all__ = ["Database", "row_to_record"]
