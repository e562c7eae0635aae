"""VibeScore weights."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import ThresholdConfig
from ..exceptions import InvalidConfigError

WEIGHT_SUM_TOLERANCE = 0.01


@dataclass(frozen=True)
class ScoreWeights:
    file_churn: float = 0.30
    time_spiral: float = 0.25
    velocity_anomaly: float = 0.20
    code_stability: float = 0.25

    @property
    def total(self) -> float:
        return self.file_churn + self.time_spiral + self.velocity_anomaly + self.code_stability

    def as_dict(self) -> dict[str, float]:
        return {
            "file_churn": self.file_churn,
            "time_spiral": self.time_spiral,
            "velocity_anomaly": self.velocity_anomaly,
            "code_stability": self.code_stability,
        }

    @classmethod
    def from_thresholds(cls, thresholds: ThresholdConfig) -> ScoreWeights:
        return cls(
            file_churn=thresholds.file_churn_weight,
            time_spiral=thresholds.time_spiral_weight,
            velocity_anomaly=thresholds.velocity_anomaly_weight,
            code_stability=thresholds.code_stability_weight,
        )


DEFAULT_WEIGHTS = ScoreWeights()


def normalize_weights(weights: ScoreWeights) -> ScoreWeights:
    """Rescale weights so they sum to 1.0."""
    total = weights.total
    if total <= 0:
        raise InvalidConfigError("weights", weights.as_dict(), "weights must have a positive sum")
    return ScoreWeights(
        file_churn=weights.file_churn / total,
        time_spiral=weights.time_spiral / total,
        velocity_anomaly=weights.velocity_anomaly / total,
        code_stability=weights.code_stability / total,
    )


def validate_weights(weights: ScoreWeights) -> None:
    if abs(weights.total - 1.0) > WEIGHT_SUM_TOLERANCE:
        raise InvalidConfigError(
            "weights",
            weights.as_dict(),
            f"weights must sum to 1.0 (got {weights.total:.3f}); use normalize_weights()",
        )
