"""Flow efficiency: share of active time not spent in debug spirals."""

from collections.abc import Iterable

from ..math import round_int
from ..temporal.fix_chains import FixChain
from .models import MetricResult, Rating, band_above

_ADVICE = {
    Rating.ELITE: "Excellent productive flow",
    Rating.HIGH: "Good balance",
    Rating.MEDIUM: "Significant debugging overhead",
    Rating.LOW: "More debugging than building",
}


def calculate_flow_efficiency(active_minutes: float, chains: Iterable[FixChain]) -> MetricResult:
    if active_minutes <= 0:
        return MetricResult(value=100, unit="%", rating=Rating.ELITE, description="No active time recorded")

    spiral_minutes = sum(c.duration for c in chains if c.is_spiral)
    efficiency = (active_minutes - spiral_minutes) / active_minutes * 100
    efficiency = max(0.0, min(100.0, efficiency))
    rating = band_above(efficiency, 90, 75, 50)

    spent = f"{spiral_minutes}m spent in debug spirals" if spiral_minutes > 0 else "No debug spirals"
    return MetricResult(
        value=round_int(efficiency), unit="%", rating=rating, description=f"{spent}. {_ADVICE[rating]}"
    )
