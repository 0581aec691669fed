"""Rendering of submissions into CSV exports and the weekly HTML summary."""

from __future__ import annotations

import csv
import io
from datetime import tzinfo
from html import escape
from typing import Iterable, List, Sequence

from .models import QUESTION_IDS, SubmissionRecord
from .scoring import average_score, mood_label, round_one
from .stats import StatsSnapshot

CSV_HEADER: List[str] = ["Date", "Name", "Department", *QUESTION_IDS, "Average", "Mood", "Feedback"]


def csv_rows(records: Iterable[SubmissionRecord], tz: tzinfo) -> Iterable[List[str]]:
    for record in records:
        average = average_score(record.scores)
        yield [
            record.created_at.astimezone(tz).date().isoformat(),
            record.name,
            record.department,
            *[str(record.scores[q]) if q in record.scores else "" for q in QUESTION_IDS],
            f"{round_one(average):.1f}",
            mood_label(average),
            record.feedback or "",
        ]


def render_csv(records: Sequence[SubmissionRecord], tz: tzinfo) -> str:
    """Return a CSV document with one row per submission."""

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADER)
    writer.writerows(csv_rows(records, tz))
    return buffer.getvalue()


def render_html(snapshot: StatsSnapshot, period_label: str) -> str:
    """Return the HTML body of the weekly summary email."""

    dept_rows = "\n".join(
        f"<tr><td>{escape(dept.name)}</td><td>{dept.count}</td><td>{dept.score:.1f}</td></tr>"
        for dept in snapshot.by_dept
    )
    trend_rows = "\n".join(
        f"<tr><td>{escape(point.date)}</td><td>{point.score:.1f}</td></tr>"
        for point in snapshot.weekly_trend
    )
    return f"""\
<div style="font-family:Arial,sans-serif;max-width:600px;margin:0 auto;">
  <h2 style="margin-bottom:4px;">Happy Meter Weekly Report</h2>
  <p style="color:#555;margin-top:0;">{escape(period_label)}</p>
  <table style="border-collapse:collapse;margin:16px 0;">
    <tr><td style="padding:6px 12px;font-weight:600;">Total submissions</td><td>{snapshot.total_count}</td></tr>
    <tr><td style="padding:6px 12px;font-weight:600;">Average mood</td><td>{snapshot.average_mood:.1f} / 5</td></tr>
  </table>
  <h3>By department</h3>
  <table style="border-collapse:collapse;width:100%;">
    <tr><th align="left">Department</th><th align="left">Responses</th><th align="left">Score</th></tr>
{dept_rows}
  </table>
  <h3>Daily trend</h3>
  <table style="border-collapse:collapse;width:100%;">
    <tr><th align="left">Day</th><th align="left">Score</th></tr>
{trend_rows}
  </table>
  <p style="color:#888;font-size:12px;">The full list of submissions is attached as CSV.</p>
</div>
"""


def render_text(snapshot: StatsSnapshot, period_label: str) -> str:
    return (
        f"Attached is the sentiment report for {period_label}.\n"
        f"Total submissions: {snapshot.total_count}\n"
        f"Average mood: {snapshot.average_mood:.1f} / 5\n"
    )


__all__ = ["CSV_HEADER", "csv_rows", "render_csv", "render_html", "render_text"]
