"""Calibration samples and the persisted calibration state."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..exceptions import InvalidLevelError
from ..recommend.ordered_logistic import DEFAULT_MODEL, N_FEATURES, N_LEVELS, ModelState
from ..recommend.phase import ModelPhase, model_phase
from ..temporal.models import parse_iso, utc_now
from .ece import Outcome, assess_outcome

DEFAULT_VERSION = "2.0.0"
TRAINED_VERSION = "2.1.0"


def _as_level(value: object) -> int:
    """Stored levels are integers; 3.0 is accepted, 2.7 is not."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"declared level must be an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"declared level must be an integer, got {value!r}")
    return int(value)


@dataclass(frozen=True)
class CalibrationSample:
    timestamp: datetime
    vibe_score: float
    declared_level: int
    outcome: Outcome
    features: tuple[float, ...]
    model_version: str = DEFAULT_VERSION

    def __post_init__(self) -> None:
        if (
            isinstance(self.declared_level, bool)
            or not isinstance(self.declared_level, int)
            or not 0 <= self.declared_level < N_LEVELS
        ):
            raise InvalidLevelError(self.declared_level, 0, N_LEVELS - 1)
        if len(self.features) != N_FEATURES:
            raise ValueError(f"expected {N_FEATURES} features, got {len(self.features)}")
        if not math.isfinite(self.vibe_score) or not 0.0 <= self.vibe_score <= 1.0:
            raise ValueError(f"vibe score must be within 0..1, got {self.vibe_score}")
        if self.outcome is not assess_outcome(self.vibe_score, self.declared_level):
            raise ValueError(f"outcome {self.outcome.value} does not match the vibe score")

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "vibeScore": self.vibe_score,
            "declaredLevel": self.declared_level,
            "outcome": self.outcome.value,
            "features": list(self.features),
            "modelVersion": self.model_version,
        }

    @classmethod
    def from_dict(cls, data: dict) -> CalibrationSample:
        return cls(
            timestamp=parse_iso(data["timestamp"]),
            vibe_score=float(data["vibeScore"]),
            declared_level=_as_level(data["declaredLevel"]),
            outcome=Outcome(data["outcome"]),
            features=tuple(float(f) for f in data["features"]),
            model_version=str(data.get("modelVersion", DEFAULT_VERSION)),
        )


@dataclass
class CalibrationState:
    """Samples plus the model they trained; mutated by the store and saved."""

    samples: list[CalibrationSample] = field(default_factory=list)
    model: ModelState = DEFAULT_MODEL
    ece: float = 0.0
    last_updated: datetime = field(default_factory=utc_now)
    version: str = DEFAULT_VERSION

    @property
    def sample_count(self) -> int:
        return len(self.samples)

    @property
    def trained(self) -> bool:
        return self.version != DEFAULT_VERSION

    def phase(self, drift_threshold: Optional[float] = None) -> ModelPhase:
        if drift_threshold is None:
            return model_phase(self.sample_count, self.trained, self.ece)
        return model_phase(self.sample_count, self.trained, self.ece, drift_threshold)

    def to_dict(self) -> dict:
        return {
            "samples": [s.to_dict() for s in self.samples],
            "weights": list(self.model.weights),
            "thresholds": list(self.model.thresholds),
            "ece": self.ece,
            "lastUpdated": self.last_updated.isoformat(),
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict) -> CalibrationState:
        """Raises KeyError, TypeError or ValueError on malformed data."""
        ece = float(data["ece"])
        if not math.isfinite(ece) or not 0.0 <= ece <= 1.0:
            raise ValueError(f"stored ECE must be within 0..1, got {ece}")
        return cls(
            samples=[CalibrationSample.from_dict(s) for s in data["samples"]],
            model=ModelState.from_lists(data["weights"], data["thresholds"]),
            ece=ece,
            last_updated=parse_iso(data["lastUpdated"]),
            version=str(data["version"]),
        )
