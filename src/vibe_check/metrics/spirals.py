"""Debug spiral duration: mean time spent inside spirals."""

from collections.abc import Iterable

from ..math import round_int
from ..temporal.fix_chains import FixChain
from .models import MetricResult, Rating, band_below

_ADVICE = {
    Rating.ELITE: "resolved quickly",
    Rating.HIGH: "normal debugging time",
    Rating.MEDIUM: "consider using tracer tests",
    Rating.LOW: "extended debugging. Use tracer tests before implementation",
}


def calculate_debug_spiral_duration(chains: Iterable[FixChain]) -> MetricResult:
    spirals = [c for c in chains if c.is_spiral]
    if not spirals:
        return MetricResult(value=0, unit="min", rating=Rating.ELITE, description="No debug spirals detected")

    mean_duration = sum(s.duration for s in spirals) / len(spirals)
    rating = band_below(mean_duration, 15, 30, 60)
    label = "1 spiral" if len(spirals) == 1 else f"{len(spirals)} spirals"
    return MetricResult(
        value=round_int(mean_duration),
        unit="min",
        rating=rating,
        description=f"{label}, {_ADVICE[rating]}",
    )
