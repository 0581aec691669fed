"""Sentiment aggregation for the admin dashboard and the weekly report."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Dict, List, Optional, Sequence

from .models import DEPARTMENTS, SubmissionRecord
from .scoring import average_score, mean, mood_label, round_one

RECENT_LIMIT = 10
TREND_DAYS = 7


@dataclass(slots=True)
class DepartmentScore:
    name: str
    score: float
    count: int


@dataclass(slots=True)
class TrendPoint:
    date: str
    score: float


@dataclass(slots=True)
class RecentCheckIn:
    name: str
    department: str
    mood_label: str
    feedback: str
    created_at: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "department": self.department,
            "moodLabel": self.mood_label,
            "feedback": self.feedback,
            "createdAt": self.created_at,
        }


@dataclass(slots=True)
class StatsSnapshot:
    """Aggregate figures computed on demand from a set of submissions."""

    total_count: int
    average_mood: float
    weekly_total: int
    weekly_average_mood: float
    week_start: datetime
    next_reset_at: datetime
    by_dept: List[DepartmentScore] = field(default_factory=list)
    weekly_trend: List[TrendPoint] = field(default_factory=list)
    recent: List[RecentCheckIn] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalCount": self.total_count,
            "averageMood": self.average_mood,
            "weeklyTotal": self.weekly_total,
            "weeklyAverageMood": self.weekly_average_mood,
            "weekStart": self.week_start.isoformat(),
            "nextResetAt": self.next_reset_at.isoformat(),
            "byDept": [
                {"name": dept.name, "score": dept.score, "count": dept.count}
                for dept in self.by_dept
            ],
            "weeklyTrend": [
                {"date": point.date, "score": point.score} for point in self.weekly_trend
            ],
            "recent": [item.to_dict() for item in self.recent],
        }


def week_bounds(now: datetime, tz: tzinfo) -> tuple[datetime, datetime]:
    """Return (start of the current week, next reset); weeks start Sunday 00:00 local."""

    local_now = now.astimezone(tz)
    days_since_sunday = (local_now.weekday() + 1) % 7
    start_day = local_now.date() - timedelta(days=days_since_sunday)
    week_start = datetime.combine(start_day, time.min, tzinfo=tz)
    return week_start, week_start + timedelta(days=7)


def trend_label(day: date) -> str:
    return f"{day:%b} {day.day}"


def display_timestamp(moment: datetime, tz: tzinfo) -> str:
    return moment.astimezone(tz).strftime("%Y-%m-%d %H:%M")


def overall_average(records: Sequence[SubmissionRecord]) -> float:
    """Mean of per-record averages, skipping records without scores."""

    return round_one(mean(average_score(r.scores) for r in records if r.scores))


def department_breakdown(records: Sequence[SubmissionRecord]) -> List[DepartmentScore]:
    averages: Dict[str, List[float]] = {dept: [] for dept in DEPARTMENTS}
    for record in records:
        if not record.scores or record.department not in averages:
            continue
        averages[record.department].append(average_score(record.scores))
    return [
        DepartmentScore(name=dept, score=round_one(mean(values)), count=len(values))
        for dept, values in averages.items()
    ]


def daily_trend(
    records: Sequence[SubmissionRecord],
    tz: tzinfo,
    trend_days: Optional[int] = TREND_DAYS,
) -> List[TrendPoint]:
    buckets: Dict[date, List[float]] = {}
    for record in records:
        if not record.scores:
            continue
        day = record.created_at.astimezone(tz).date()
        buckets.setdefault(day, []).append(average_score(record.scores))

    points = [
        TrendPoint(date=trend_label(day), score=round_one(mean(values)))
        for day, values in sorted(buckets.items())
    ]
    if trend_days is not None:
        points = points[-trend_days:] if trend_days > 0 else []
    return points


def recent_checkins(
    records: Sequence[SubmissionRecord], tz: tzinfo, limit: int = RECENT_LIMIT
) -> List[RecentCheckIn]:
    return [
        RecentCheckIn(
            name=record.name,
            department=record.department,
            mood_label=mood_label(average_score(record.scores)),
            feedback=record.feedback or "",
            created_at=display_timestamp(record.created_at, tz),
        )
        for record in records[:limit]
    ]


def compute_stats(
    records: Sequence[SubmissionRecord],
    now: datetime,
    tz: tzinfo,
    trend_days: Optional[int] = TREND_DAYS,
) -> StatsSnapshot:
    """Build a snapshot from records ordered most-recent-first."""

    week_start, next_reset = week_bounds(now, tz)
    this_week = [record for record in records if record.created_at >= week_start]

    return StatsSnapshot(
        total_count=len(records),
        average_mood=overall_average(records),
        weekly_total=len(this_week),
        weekly_average_mood=overall_average(this_week),
        week_start=week_start,
        next_reset_at=next_reset,
        by_dept=department_breakdown(records),
        weekly_trend=daily_trend(records, tz, trend_days),
        recent=recent_checkins(records, tz),
    )


__all__ = [
    "DepartmentScore",
    "RecentCheckIn",
    "StatsSnapshot",
    "TrendPoint",
    "compute_stats",
    "daily_trend",
    "department_breakdown",
    "display_timestamp",
    "overall_average",
    "recent_checkins",
    "trend_label",
    "week_bounds",
]
