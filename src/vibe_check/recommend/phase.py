"""Lifecycle of the recommendation model."""

from enum import Enum

DRIFT_ECE_THRESHOLD = 0.15


class ModelPhase(str, Enum):
    """DEFAULT -> COLLECTING -> CALIBRATED <-> DRIFTING."""

    DEFAULT = "default"  # hand-tuned parameters, no samples
    COLLECTING = "collecting"  # samples recorded, never retrained
    CALIBRATED = "calibrated"
    DRIFTING = "drifting"  # retrained, but ECE above the drift threshold


def model_phase(
    sample_count: int, retrained: bool, ece: float, drift_threshold: float = DRIFT_ECE_THRESHOLD
) -> ModelPhase:
    if sample_count == 0:
        return ModelPhase.DEFAULT
    if not retrained:
        return ModelPhase.COLLECTING
    if ece > drift_threshold:
        return ModelPhase.DRIFTING
    return ModelPhase.CALIBRATED
