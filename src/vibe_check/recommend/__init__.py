"""Ordinal trust-level recommendation."""

from .ordered_logistic import (
    DEFAULT_LEARNING_RATE,
    DEFAULT_MODEL,
    FEATURE_NAMES,
    N_FEATURES,
    N_LEVELS,
    ModelState,
    Prediction,
    batch_partial_fit,
    partial_fit,
    predict,
    predict_proba,
    predict_with_confidence,
    training_epochs,
)
from .phase import DRIFT_ECE_THRESHOLD, ModelPhase, model_phase
from .questions import (
    FALLBACK_METRIC_FEATURE,
    TRUST_LEVELS,
    VIBE_QUESTIONS,
    Question,
    QuestionOption,
    QuestionResponses,
    TrustLevel,
    build_features,
    calculate_base_level,
)

__all__ = [
    "N_LEVELS",
    "N_FEATURES",
    "FEATURE_NAMES",
    "DEFAULT_MODEL",
    "DEFAULT_LEARNING_RATE",
    "ModelState",
    "Prediction",
    "predict_proba",
    "predict",
    "predict_with_confidence",
    "partial_fit",
    "batch_partial_fit",
    "training_epochs",
    "ModelPhase",
    "DRIFT_ECE_THRESHOLD",
    "model_phase",
    "Question",
    "QuestionOption",
    "QuestionResponses",
    "TrustLevel",
    "TRUST_LEVELS",
    "VIBE_QUESTIONS",
    "FALLBACK_METRIC_FEATURE",
    "calculate_base_level",
    "build_features",
]
