"""Dataclasses and fixed enumerations for Happy Meter check-ins."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

DEPARTMENTS: tuple[str, ...] = (
    "Executive",
    "Corp",
    "Human Resources",
    "Finance",
    "Data Operations",
    "PABE Trucking",
    "Kariyala Manpower",
    "EDM Security",
    "Trimega",
)


@dataclass(frozen=True, slots=True)
class Question:
    id: str
    text: str
    category: str


QUESTIONS: tuple[Question, ...] = (
    Question("q1", "How are you today?", "Mood & Well-Being"),
    Question("q2", "How appreciated do you feel?", "Collaboration"),
    Question("q3", "How manageable is your workload today?", "Productivity"),
    Question("q4", "How comfortable is your workspace today?", "Work Environment"),
    Question("q5", "How motivated do you feel today?", "Motivation & Purpose"),
)

QUESTION_IDS: tuple[str, ...] = tuple(question.id for question in QUESTIONS)

SCORE_LABELS = {1: "Poor", 2: "Fair", 3: "Good", 4: "Very Good", 5: "Excellent"}
MIN_SCORE = 1
MAX_SCORE = 5


@dataclass(frozen=True, slots=True)
class SubmissionRecord:
    id: str
    name: str
    department: str
    created_at: datetime
    scores: dict[str, int] = field(default_factory=dict)
    feedback: str = ""


__all__ = [
    "DEPARTMENTS",
    "MAX_SCORE",
    "MIN_SCORE",
    "QUESTIONS",
    "QUESTION_IDS",
    "SCORE_LABELS",
    "Question",
    "SubmissionRecord",
]
