"""Calibration learner and local store."""

from .ece import EXPECTED_RANGES, Outcome, assess_outcome, calculate_ece, expected_range, infer_true_level
from .models import DEFAULT_VERSION, TRAINED_VERSION, CalibrationSample, CalibrationState
from .storage import CALIBRATION_FILE, CalibrationStore, retrain, should_retrain

__all__ = [
    "EXPECTED_RANGES",
    "Outcome",
    "assess_outcome",
    "calculate_ece",
    "expected_range",
    "infer_true_level",
    "CalibrationSample",
    "CalibrationState",
    "DEFAULT_VERSION",
    "TRAINED_VERSION",
    "CalibrationStore",
    "CALIBRATION_FILE",
    "retrain",
    "should_retrain",
]
