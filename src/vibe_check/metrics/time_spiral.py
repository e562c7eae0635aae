"""Time spiral: bursts of commits landing minutes apart."""

from collections.abc import Sequence

from ..math import round_int
from ..temporal.models import Commit, minutes_between, sort_commits
from .models import Rating, TimeSpiralResult, band_below

RAPID_COMMIT_MINUTES = 5


def calculate_time_spiral(
    commits: Sequence[Commit], rapid_minutes: float = RAPID_COMMIT_MINUTES
) -> TimeSpiralResult:
    """Score from the fraction of consecutive pairs closer than ``rapid_minutes``."""
    if len(commits) < 2:
        return TimeSpiralResult(
            value=100,
            unit="%",
            rating=Rating.ELITE,
            description="Insufficient commits for analysis",
            spiral_commits=0,
            total_commits=len(commits),
        )

    ordered = sort_commits(commits)
    rapid = sum(
        1 for prev, cur in zip(ordered, ordered[1:]) if minutes_between(prev.date, cur.date) < rapid_minutes
    )
    fraction = rapid / (len(ordered) - 1)

    rating = band_below(fraction, 0.15, 0.30, 0.50)
    if fraction < 0.15:
        detail = "(<15%)"
    elif fraction < 0.30:
        detail = "(15-30%)"
    elif fraction < 0.50:
        detail = "(30-50%)"
    else:
        detail = "(>50%) - frustrated iteration"

    return TimeSpiralResult(
        value=round_int((1 - fraction) * 100),
        unit="%",
        rating=rating,
        description=f"{rating.value.capitalize()}: {rapid}/{len(ordered) - 1} rapid commit gaps {detail}",
        spiral_commits=rapid,
        total_commits=len(ordered),
    )
