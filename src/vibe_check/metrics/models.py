"""Result types shared by all metrics."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum


class Rating(str, Enum):
    """Four-band ordinal rating, best first."""

    ELITE = "elite"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def score(self) -> int:
        return _RATING_SCORES[self]


_RATING_SCORES = {Rating.ELITE: 4, Rating.HIGH: 3, Rating.MEDIUM: 2, Rating.LOW: 1}


class OverallRating(str, Enum):
    ELITE = "ELITE"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


@dataclass(frozen=True)
class MetricResult:
    value: float
    unit: str
    rating: Rating
    description: str

    def to_dict(self) -> dict:
        data = asdict(self)
        data["rating"] = self.rating.value
        return data


@dataclass(frozen=True)
class FileChurnResult(MetricResult):
    churned_files: int = 0
    total_files: int = 0


@dataclass(frozen=True)
class TimeSpiralResult(MetricResult):
    spiral_commits: int = 0
    total_commits: int = 0


@dataclass(frozen=True)
class VelocityAnomalyResult(MetricResult):
    current_velocity: float = 0.0
    baseline_mean: float = 0.0
    baseline_std: float = 0.0
    z_score: float = 0.0


@dataclass(frozen=True)
class CodeStabilityResult(MetricResult):
    lines_added: int = 0
    lines_surviving: int = 0


def band_above(value: float, elite: float, high: float, medium: float) -> Rating:
    """Rating where larger is better: > elite, >= high, >= medium."""
    if value > elite:
        return Rating.ELITE
    if value >= high:
        return Rating.HIGH
    if value >= medium:
        return Rating.MEDIUM
    return Rating.LOW


def band_below(value: float, elite: float, high: float, medium: float) -> Rating:
    """Rating where smaller is better: < elite, < high, < medium."""
    if value < elite:
        return Rating.ELITE
    if value < high:
        return Rating.HIGH
    if value < medium:
        return Rating.MEDIUM
    return Rating.LOW


def band_at_least(value: float, elite: float, high: float, medium: float) -> Rating:
    """Rating where larger is better and every cut point is inclusive."""
    if value >= elite:
        return Rating.ELITE
    if value >= high:
        return Rating.HIGH
    if value >= medium:
        return Rating.MEDIUM
    return Rating.LOW


@dataclass(frozen=True)
class ScoreInputs:
    """The four semantic-free metrics that feed the VibeScore."""

    file_churn: FileChurnResult
    time_spiral: TimeSpiralResult
    velocity_anomaly: VelocityAnomalyResult
    code_stability: CodeStabilityResult

    def values(self) -> dict[str, float]:
        return {
            "file_churn": self.file_churn.value,
            "time_spiral": self.time_spiral.value,
            "velocity_anomaly": self.velocity_anomaly.value,
            "code_stability": self.code_stability.value,
        }

    def to_dict(self) -> dict:
        return {
            "file_churn": self.file_churn.to_dict(),
            "time_spiral": self.time_spiral.to_dict(),
            "velocity_anomaly": self.velocity_anomaly.to_dict(),
            "code_stability": self.code_stability.to_dict(),
        }
