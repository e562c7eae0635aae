"""Expected calibration error and score/level mapping.

Each declared level expects the VibeScore to land in a range. ECE is the
sample-weighted distance between the mean observed score per level and the
centre of that level's range.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import TYPE_CHECKING

from ..exceptions import InvalidLevelError
from ..math import Statistics, round_half_up

if TYPE_CHECKING:
    from .models import CalibrationSample

EXPECTED_RANGES: dict[int, tuple[float, float]] = {
    5: (0.90, 1.00),
    4: (0.80, 0.90),
    3: (0.65, 0.80),
    2: (0.50, 0.70),
    1: (0.30, 0.55),
    0: (0.00, 0.40),
}

# (minimum score, level), checked top to bottom
_LEVEL_CUTS = ((0.90, 5), (0.80, 4), (0.65, 3), (0.50, 2), (0.30, 1))


class Outcome(str, Enum):
    CORRECT = "correct"
    TOO_HIGH = "too_high"  # declared level was too aggressive
    TOO_LOW = "too_low"  # declared level was too conservative


def expected_range(level: int) -> tuple[float, float]:
    try:
        return EXPECTED_RANGES[level]
    except (KeyError, TypeError):
        raise InvalidLevelError(level) from None


def calculate_ece(samples: Iterable[CalibrationSample]) -> float:
    """ECE over all samples, rounded to 3 decimals; 0.0 without samples."""
    samples = list(samples)
    if not samples:
        return 0.0

    bins: dict[int, list[float]] = {}
    for sample in samples:
        bins.setdefault(sample.declared_level, []).append(sample.vibe_score)

    ece = 0.0
    for level, scores in bins.items():
        low, high = expected_range(level)
        center = (low + high) / 2
        ece += len(scores) / len(samples) * abs(Statistics.mean(scores) - center)

    return round_half_up(ece, 3)


def assess_outcome(vibe_score: float, declared_level: int) -> Outcome:
    low, high = expected_range(declared_level)
    if low <= vibe_score <= high:
        return Outcome.CORRECT
    if vibe_score > high:
        return Outcome.TOO_LOW
    return Outcome.TOO_HIGH


def infer_true_level(vibe_score: float) -> int:
    """Training label for a sample, derived from its observed score."""
    for cut, level in _LEVEL_CUTS:
        if vibe_score >= cut:
            return level
    return 0
