"""Ordered (cumulative-logit) logistic regression over trust levels 0-5.

P(Y <= k) = sigmoid(threshold_k - eta), eta = features . weights

The model is a plain immutable value; fitting returns a new ModelState.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from ..exceptions import InvalidFeatureError, InvalidLevelError

N_LEVELS = 6
N_FEATURES = 9
N_THRESHOLDS = N_LEVELS - 1

FEATURE_NAMES = (
    "reversibility",
    "blast_radius",
    "verification_cost",
    "domain_complexity",
    "ai_track_record",
    "file_churn_score",
    "time_spiral_score",
    "velocity_anomaly_score",
    "code_stability_score",
)

DEFAULT_LEARNING_RATE = 0.1

_FEATURE_LIMIT = 1e150
_LOGIT_LIMIT = 500.0
_MIN_PROBABILITY = 1e-10
_MAX_GRADIENT = 10.0
_THRESHOLD_LIMIT = 50.0
_MIN_THRESHOLD_GAP = 0.05


@dataclass(frozen=True)
class ModelState:
    weights: tuple[float, ...]
    thresholds: tuple[float, ...]  # strictly increasing

    def __post_init__(self) -> None:
        if len(self.weights) != N_FEATURES:
            raise ValueError(f"expected {N_FEATURES} weights, got {len(self.weights)}")
        if len(self.thresholds) != N_THRESHOLDS:
            raise ValueError(f"expected {N_THRESHOLDS} thresholds, got {len(self.thresholds)}")
        values = list(self.weights) + list(self.thresholds)
        if not all(math.isfinite(v) for v in values):
            raise ValueError("model parameters must be finite")
        if any(b <= a for a, b in zip(self.thresholds, self.thresholds[1:])):
            raise ValueError("thresholds must be strictly increasing")

    @classmethod
    def from_lists(cls, weights: Iterable[float], thresholds: Iterable[float]) -> ModelState:
        return cls(tuple(float(w) for w in weights), tuple(float(t) for t in thresholds))


# Hand-tuned: risky answers lower the level, healthy metrics raise it.
DEFAULT_MODEL = ModelState(
    weights=(0.3, -0.5, -0.4, -0.4, 0.3, 0.8, 0.6, 0.3, 0.5),
    thresholds=(-2.0, -0.8, 0.4, 1.6, 2.8),
)


@dataclass(frozen=True)
class Prediction:
    level: int
    confidence: float
    ci: tuple[float, float]
    probs: tuple[float, ...]

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "confidence": self.confidence,
            "ci": list(self.ci),
            "probs": list(self.probs),
        }


def _as_features(features: Sequence[float]) -> np.ndarray:
    x = np.asarray(features, dtype=float).reshape(-1)
    if x.shape[0] != N_FEATURES:
        raise InvalidFeatureError(N_FEATURES, int(x.shape[0]))
    x = np.nan_to_num(x, nan=0.0, posinf=_FEATURE_LIMIT, neginf=-_FEATURE_LIMIT)
    return np.clip(x, -_FEATURE_LIMIT, _FEATURE_LIMIT)


def _check_level(level: int) -> int:
    if isinstance(level, bool) or not isinstance(level, (int, np.integer)) or not 0 <= level < N_LEVELS:
        raise InvalidLevelError(level, 0, N_LEVELS - 1)
    return int(level)


def _sigmoid(z):
    return 1.0 / (1.0 + np.exp(-np.clip(z, -_LOGIT_LIMIT, _LOGIT_LIMIT)))


def _density(z):
    s = _sigmoid(z)
    return s * (1.0 - s)


def _linear_predictor(x: np.ndarray, model: ModelState) -> float:
    eta = float(np.dot(x, np.asarray(model.weights)))
    return eta if math.isfinite(eta) else math.copysign(_FEATURE_LIMIT, eta)


def predict_proba(features: Sequence[float], model: ModelState = DEFAULT_MODEL) -> list[float]:
    """Probability of each level 0..5; non-negative and summing to 1."""
    x = _as_features(features)
    eta = _linear_predictor(x, model)

    cumulative = _sigmoid(np.asarray(model.thresholds) - eta)
    bounds = np.concatenate(([0.0], cumulative, [1.0]))
    probs = np.clip(np.diff(bounds), 0.0, None)

    total = probs.sum()
    if total <= 0 or not np.isfinite(total):
        probs = np.full(N_LEVELS, 1.0 / N_LEVELS)
    else:
        probs = probs / total
    return [float(p) for p in probs]


def predict(features: Sequence[float], model: ModelState = DEFAULT_MODEL) -> int:
    probs = predict_proba(features, model)
    return int(np.argmax(probs))


def predict_with_confidence(features: Sequence[float], model: ModelState = DEFAULT_MODEL) -> Prediction:
    """Most likely level, its probability, and mean +- 1.96 sd clamped to [0, 5]."""
    probs = np.asarray(predict_proba(features, model))
    level = int(np.argmax(probs))

    levels = np.arange(N_LEVELS)
    mean = float(np.dot(levels, probs))
    std = math.sqrt(max(float(np.dot(probs, (levels - mean) ** 2)), 0.0))
    ci = (max(0.0, mean - 1.96 * std), min(float(N_LEVELS - 1), mean + 1.96 * std))

    return Prediction(
        level=level,
        confidence=float(probs[level]),
        ci=ci,
        probs=tuple(float(p) for p in probs),
    )


def _repair_thresholds(thresholds: np.ndarray, fallback: Sequence[float]) -> np.ndarray:
    """Keep thresholds finite, bounded and strictly increasing."""
    t = np.where(np.isfinite(thresholds), thresholds, np.asarray(fallback))
    t = np.sort(np.clip(t, -_THRESHOLD_LIMIT, _THRESHOLD_LIMIT))
    for k in range(1, len(t)):
        if t[k] < t[k - 1] + _MIN_THRESHOLD_GAP:
            t[k] = t[k - 1] + _MIN_THRESHOLD_GAP
        if not t[k] > t[k - 1]:
            t[k] = np.nextafter(t[k - 1], np.inf)
    return t


def partial_fit(
    model: ModelState,
    features: Sequence[float],
    true_level: int,
    learning_rate: float = DEFAULT_LEARNING_RATE,
) -> ModelState:
    """One gradient step on the negative log-likelihood of ``true_level``.

    Raises:
        InvalidFeatureError: If ``features`` does not have 9 entries
        InvalidLevelError: If ``true_level`` is outside 0..5
    """
    x = _as_features(features)
    k = _check_level(true_level)
    eta = _linear_predictor(x, model)

    weights = np.asarray(model.weights, dtype=float)
    thresholds = np.asarray(model.thresholds, dtype=float)

    upper = thresholds[k] - eta if k < N_THRESHOLDS else None
    lower = thresholds[k - 1] - eta if k > 0 else None

    cdf_upper = float(_sigmoid(upper)) if upper is not None else 1.0
    cdf_lower = float(_sigmoid(lower)) if lower is not None else 0.0
    pdf_upper = float(_density(upper)) if upper is not None else 0.0
    pdf_lower = float(_density(lower)) if lower is not None else 0.0
    likelihood = max(cdf_upper - cdf_lower, _MIN_PROBABILITY)

    eta_grad = float(np.clip((pdf_upper - pdf_lower) / likelihood, -_MAX_GRADIENT, _MAX_GRADIENT))
    with np.errstate(over="ignore", invalid="ignore"):
        new_weights = weights - learning_rate * eta_grad * x
    new_weights = np.where(np.isfinite(new_weights), new_weights, weights)

    new_thresholds = thresholds.copy()
    if upper is not None:
        new_thresholds[k] += learning_rate * min(pdf_upper / likelihood, _MAX_GRADIENT)
    if lower is not None:
        new_thresholds[k - 1] -= learning_rate * min(pdf_lower / likelihood, _MAX_GRADIENT)
    new_thresholds = _repair_thresholds(new_thresholds, model.thresholds)

    return ModelState.from_lists(new_weights, new_thresholds)


def training_epochs(sample_count: int) -> int:
    """Epochs for a batch refit: min(10, ceil(50 / n))."""
    if sample_count <= 0:
        return 0
    return min(10, math.ceil(50 / sample_count))


def batch_partial_fit(
    model: ModelState,
    samples: Iterable[tuple[Sequence[float], int]],
    learning_rate: float = DEFAULT_LEARNING_RATE,
    epochs: int = 1,
) -> ModelState:
    """Apply partial_fit over every (features, level) sample, ``epochs`` times."""
    samples = list(samples)
    for _ in range(epochs):
        for features, level in samples:
            model = partial_fit(model, features, level, learning_rate)
    return model
