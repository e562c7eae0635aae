"""Rework ratio: share of commits that are fixes."""

from collections.abc import Sequence

from ..math import round_int
from ..temporal.models import Commit
from .models import MetricResult, Rating, band_below

_ADVICE = {
    Rating.ELITE: "Mostly forward progress",
    Rating.HIGH: "Normal for complex work",
    Rating.MEDIUM: "Consider validating assumptions before coding",
    Rating.LOW: "High rework, stop and reassess approach",
}


def calculate_rework_ratio(commits: Sequence[Commit]) -> MetricResult:
    if not commits:
        return MetricResult(value=0, unit="%", rating=Rating.ELITE, description="No commits found")

    fixes = sum(1 for c in commits if c.is_fix)
    ratio = fixes / len(commits) * 100
    rating = band_below(ratio, 30, 50, 70)
    return MetricResult(
        value=round_int(ratio),
        unit="%",
        rating=rating,
        description=f"{fixes}/{len(commits)} commits are fixes. {_ADVICE[rating]}",
    )
