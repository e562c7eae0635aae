"""Persisted calibration state and the retraining policy.

The state lives in ``.vibe-check/calibration.json`` under the repository
root. Writes are atomic, but there is no lock: two processes updating the
same file concurrently can lose one another's samples.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..exceptions import VibeCheckError
from ..file_ops import DATA_DIR_NAME, atomic_write_json, data_dir, read_json
from ..logging_config import get_logger
from ..recommend.ordered_logistic import DEFAULT_MODEL, batch_partial_fit, training_epochs
from ..temporal.models import utc_now
from .ece import assess_outcome, calculate_ece, infer_true_level
from .models import TRAINED_VERSION, CalibrationSample, CalibrationState

logger = get_logger(__name__)

CALIBRATION_FILE = "calibration.json"


def should_retrain(state: CalibrationState, thresholds: ThresholdConfig = DEFAULT_THRESHOLDS) -> bool:
    """Every Nth sample, or while the stored ECE is high; never below the minimum."""
    n = state.sample_count
    if n < thresholds.min_samples_for_retrain:
        return False
    return n % thresholds.retrain_sample_interval == 0 or state.ece > thresholds.retrain_ece_threshold


def retrain(state: CalibrationState, thresholds: ThresholdConfig = DEFAULT_THRESHOLDS) -> CalibrationState:
    """Refit from the default model on labels inferred from each sample's score.

    Below ``min_samples_for_retrain`` samples the state is returned unchanged.
    """
    n = state.sample_count
    if n < thresholds.min_samples_for_retrain:
        logger.debug("Skipping retrain: %d samples, need %d", n, thresholds.min_samples_for_retrain)
        return state

    training_data = [(s.features, infer_true_level(s.vibe_score)) for s in state.samples]
    epochs = training_epochs(n)
    model = batch_partial_fit(DEFAULT_MODEL, training_data, thresholds.learning_rate, epochs)
    ece = calculate_ece(state.samples)

    logger.info("Retrained calibration model on %d samples (%d epochs, ECE %.3f)", n, epochs, ece)
    return replace(state, model=model, ece=ece, last_updated=utc_now(), version=TRAINED_VERSION)


class CalibrationStore:
    """Load, update and persist the calibration state of one repository."""

    def __init__(
        self,
        repo_path: str = ".",
        thresholds: ThresholdConfig = DEFAULT_THRESHOLDS,
        dir_name: str = DATA_DIR_NAME,
    ):
        self.path: Path = data_dir(repo_path, dir_name) / CALIBRATION_FILE
        self.thresholds = thresholds

    def load(self) -> CalibrationState:
        """Read the state; a missing or corrupt file yields the default state."""
        if not self.path.exists():
            return CalibrationState()
        try:
            return CalibrationState.from_dict(read_json(self.path))
        except (OSError, ValueError, KeyError, TypeError, VibeCheckError) as e:
            logger.warning("Resetting unreadable calibration file %s: %s", self.path, e)
            return CalibrationState()

    def save(self, state: CalibrationState) -> None:
        atomic_write_json(self.path, state.to_dict())

    def add_sample(self, sample: CalibrationSample) -> CalibrationState:
        """Append a sample, retrain if the policy says so, and save."""
        state = self.load()
        state.samples.append(sample)
        state.last_updated = utc_now()

        if should_retrain(state, self.thresholds):
            state = retrain(state, self.thresholds)

        self.save(state)
        return state

    def record(
        self, features: Sequence[float], declared_level: int, vibe_score: float
    ) -> CalibrationState:
        """Build a sample for an observed score and add it."""
        state = self.load()
        sample = CalibrationSample(
            timestamp=utc_now(),
            vibe_score=vibe_score,
            declared_level=declared_level,
            outcome=assess_outcome(vibe_score, declared_level),
            features=tuple(float(f) for f in features),
            model_version=state.version,
        )
        return self.add_sample(sample)

    def force_retrain(self) -> CalibrationState:
        """Retrain now; with too few samples the stored state is returned untouched."""
        state = self.load()
        if state.sample_count < self.thresholds.min_samples_for_retrain:
            return state
        state = retrain(state, self.thresholds)
        self.save(state)
        return state
