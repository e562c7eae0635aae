"""VibeScore aggregation."""

from .vibe_score import VibeScore, calculate_vibe_score, score_to_expected_level
from .weights import DEFAULT_WEIGHTS, ScoreWeights, normalize_weights, validate_weights

__all__ = [
    "VibeScore",
    "ScoreWeights",
    "DEFAULT_WEIGHTS",
    "calculate_vibe_score",
    "normalize_weights",
    "validate_weights",
    "score_to_expected_level",
]
