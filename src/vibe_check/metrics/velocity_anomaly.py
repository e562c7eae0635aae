"""Velocity anomaly: distance of current velocity from a personal baseline."""

from collections.abc import Sequence
from typing import Optional

from ..math import Statistics, round_half_up, round_int
from ..temporal.models import Commit, VelocityBaseline
from ..temporal.sessions import (
    ACTIVE_TIME_GAP_MINUTES,
    MIN_MINUTES_PER_COMMIT,
    calculate_active_hours,
)
from .models import Rating, VelocityAnomalyResult, band_below

DEFAULT_BASELINE = VelocityBaseline(mean=3.0, std=1.5)
# z below which the score stays above 0.5
SIGMOID_CENTER = 1.5


def calculate_velocity_anomaly(
    commits: Sequence[Commit],
    baseline: Optional[VelocityBaseline] = None,
    session_gap_minutes: int = ACTIVE_TIME_GAP_MINUTES,
    min_minutes_per_commit: int = MIN_MINUTES_PER_COMMIT,
) -> VelocityAnomalyResult:
    """Score = sigmoid(1.5 - z) with z = |velocity - mean| / std.

    No commits means no evidence of an anomaly, so z is 0.
    """
    base = baseline or DEFAULT_BASELINE

    if commits:
        hours = calculate_active_hours(commits, session_gap_minutes, min_minutes_per_commit)
        velocity = len(commits) / hours
        z = Statistics.z_score(velocity, base.mean, base.std)
    else:
        velocity = 0.0
        z = 0.0

    score = Statistics.sigmoid(SIGMOID_CENTER - z)
    rating = band_below(z, 1.0, 1.5, 2.0)

    if rating is Rating.ELITE:
        description = f"Elite: {velocity:.1f}/hr (near baseline {base.mean:.1f}/hr)"
    else:
        description = f"{rating.value.capitalize()}: {velocity:.1f}/hr ({z:.1f}σ from baseline)"
        if rating is Rating.LOW:
            description += " - unusual pattern"

    return VelocityAnomalyResult(
        value=round_int(score * 100),
        unit="%",
        rating=rating,
        description=description,
        current_velocity=round_half_up(velocity, 1),
        baseline_mean=base.mean,
        baseline_std=base.std,
        z_score=round_half_up(z, 2),
    )
