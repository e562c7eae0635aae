"""Iteration velocity: commits per active hour."""

from collections.abc import Sequence

from ..math import round_half_up
from ..temporal.models import Commit
from ..temporal.sessions import (
    ACTIVE_TIME_GAP_MINUTES,
    MIN_MINUTES_PER_COMMIT,
    calculate_active_hours,
)
from .models import MetricResult, Rating, band_above

_DESCRIPTIONS = {
    Rating.ELITE: "Excellent iteration speed, tight feedback loops",
    Rating.HIGH: "Good iteration speed",
    Rating.MEDIUM: "Normal pace",
    Rating.LOW: "Slow iteration, consider smaller commits",
}


def calculate_iteration_velocity(
    commits: Sequence[Commit],
    session_gap_minutes: int = ACTIVE_TIME_GAP_MINUTES,
    min_minutes_per_commit: int = MIN_MINUTES_PER_COMMIT,
) -> MetricResult:
    if not commits:
        return MetricResult(value=0, unit="commits/hour", rating=Rating.LOW, description="No commits found")

    hours = calculate_active_hours(commits, session_gap_minutes, min_minutes_per_commit)
    velocity = len(commits) / hours
    rating = band_above(velocity, 5, 3, 1)
    return MetricResult(
        value=round_half_up(velocity, 1),
        unit="commits/hour",
        rating=rating,
        description=_DESCRIPTIONS[rating],
    )
