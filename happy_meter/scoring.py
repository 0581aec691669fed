"""Score helpers shared by submission intake, the dashboard and the weekly report."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping

VERY_SATISFIED = "Very Satisfied"
SATISFIED = "Satisfied"
NEUTRAL = "Neutral"
DISSATISFIED = "Dissatisfied"

# (lower bound inclusive, label), highest tier first
MOOD_TIERS = (
    (4.5, VERY_SATISFIED),
    (3.5, SATISFIED),
    (2.5, NEUTRAL),
)


def average_score(scores: Mapping[str, int]) -> float:
    """Return the mean of a score map, or ``0.0`` when it is empty."""

    values = list(scores.values())
    if not values:
        return 0.0
    return sum(values) / len(values)


def mood_label(average: float) -> str:
    """Classify a mean score into one of the four mood tiers."""

    for lower_bound, label in MOOD_TIERS:
        if average >= lower_bound:
            return label
    return DISSATISFIED


def mean(values: Iterable[float]) -> float:
    items = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)


def round_one(value: float) -> float:
    """Round half-up to one decimal place (``3.25 -> 3.3``)."""

    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


__all__ = [
    "DISSATISFIED",
    "NEUTRAL",
    "SATISFIED",
    "VERY_SATISFIED",
    "average_score",
    "mean",
    "mood_label",
    "round_one",
]
