"""Tests for VibeScore weighting."""

import random

import pytest

from vibe_check.config import ThresholdConfig
from vibe_check.exceptions import InvalidConfigError
from vibe_check.metrics import calculate_semantic_free_metrics
from vibe_check.score import (
    DEFAULT_WEIGHTS,
    ScoreWeights,
    calculate_vibe_score,
    normalize_weights,
    score_to_expected_level,
)


def inputs(file_churn, time_spiral, velocity_anomaly, code_stability):
    return {
        "file_churn": file_churn,
        "time_spiral": time_spiral,
        "velocity_anomaly": velocity_anomaly,
        "code_stability": code_stability,
    }


class TestCalculateVibeScore:
    def test_all_max(self):
        assert calculate_vibe_score(inputs(100, 100, 100, 100)).value == 1.0

    def test_all_zero(self):
        assert calculate_vibe_score(inputs(0, 0, 0, 0)).value == 0.0

    def test_linearity(self):
        """Churn and spiral at 100 contribute exactly their weights."""
        score = calculate_vibe_score(inputs(100, 100, 0, 0))
        assert score.value == pytest.approx(0.55)
        assert score.components == {
            "file_churn": 1.0,
            "time_spiral": 1.0,
            "velocity_anomaly": 0.0,
            "code_stability": 0.0,
        }

    def test_bounds(self):
        rng = random.Random(3)
        for _ in range(200):
            values = inputs(*(rng.uniform(0, 100) for _ in range(4)))
            assert 0.0 <= calculate_vibe_score(values).value <= 1.0

    def test_rounded_to_two_decimals(self):
        assert calculate_vibe_score(inputs(77, 91, 63, 90)).value == 0.81

    def test_accepts_metric_results(self, healthy_commits):
        metrics = calculate_semantic_free_metrics(healthy_commits)
        score = calculate_vibe_score(metrics)
        assert score.components["velocity_anomaly"] == metrics.velocity_anomaly.value / 100
        assert score.to_dict()["weights"] == DEFAULT_WEIGHTS.as_dict()

    def test_invalid_weights(self):
        with pytest.raises(InvalidConfigError):
            calculate_vibe_score(inputs(50, 50, 50, 50), ScoreWeights(0.5, 0.5, 0.5, 0.5))

    def test_tolerance(self):
        weights = ScoreWeights(0.30, 0.25, 0.20, 0.255)
        assert calculate_vibe_score(inputs(100, 100, 100, 100), weights).value == pytest.approx(1.0, abs=0.01)


class TestWeights:
    def test_defaults_sum_to_one(self):
        assert DEFAULT_WEIGHTS.total == pytest.approx(1.0)

    def test_normalize(self):
        weights = normalize_weights(ScoreWeights(3, 1, 0, 0))
        assert weights.file_churn == pytest.approx(0.75)
        assert weights.time_spiral == pytest.approx(0.25)

    def test_normalize_zero_total(self):
        with pytest.raises(InvalidConfigError):
            normalize_weights(ScoreWeights(0, 0, 0, 0))

    def test_from_thresholds(self):
        thresholds = ThresholdConfig(
            file_churn_weight=0.25,
            time_spiral_weight=0.25,
            velocity_anomaly_weight=0.25,
            code_stability_weight=0.25,
        )
        assert ScoreWeights.from_thresholds(thresholds) == ScoreWeights(0.25, 0.25, 0.25, 0.25)


@pytest.mark.parametrize(
    "score, expected",
    [(0.95, (4, 5)), (0.90, (4, 5)), (0.80, (3, 4)), (0.6, (2, 3)), (0.45, (1, 2)), (0.1, (0, 1))],
)
def test_score_to_expected_level(score, expected):
    assert score_to_expected_level(score) == expected
