"""Weighted combination of the semantic-free metrics."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Union

from ..math import round_half_up
from ..metrics.models import ScoreInputs
from .weights import DEFAULT_WEIGHTS, ScoreWeights, validate_weights


@dataclass(frozen=True)
class VibeScore:
    value: float  # 0..1, two decimals
    components: dict[str, float] = field(default_factory=dict)  # each 0..1
    weights: ScoreWeights = DEFAULT_WEIGHTS

    def to_dict(self) -> dict:
        return {
            "value": self.value,
            "components": dict(self.components),
            "weights": self.weights.as_dict(),
        }


def calculate_vibe_score(
    inputs: Union[ScoreInputs, Mapping[str, float]], weights: ScoreWeights = DEFAULT_WEIGHTS
) -> VibeScore:
    """Combine the four metric values (each 0..100) into a score in [0, 1].

    ``inputs`` is either the metric results or a mapping of component name
    to value.

    Raises:
        InvalidConfigError: If the weights do not sum to 1.0
    """
    validate_weights(weights)
    values = inputs.values() if isinstance(inputs, ScoreInputs) else dict(inputs)

    weight_map = weights.as_dict()
    components = {name: values[name] / 100 for name in weight_map}
    value = sum(weight_map[name] * components[name] for name in weight_map)

    return VibeScore(value=round_half_up(value, 2), components=components, weights=weights)


def score_to_expected_level(score: float) -> tuple[int, int]:
    """Trust-level range a score supports, as (min, max)."""
    if score >= 0.90:
        return 4, 5
    if score >= 0.75:
        return 3, 4
    if score >= 0.60:
        return 2, 3
    if score >= 0.40:
        return 1, 2
    return 0, 1
