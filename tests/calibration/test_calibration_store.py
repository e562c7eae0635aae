"""Tests for the persisted calibration state and retraining policy."""

import json
from dataclasses import replace

import pytest

from vibe_check.calibration import (
    DEFAULT_VERSION,
    TRAINED_VERSION,
    CalibrationState,
    CalibrationStore,
    retrain,
    should_retrain,
)
from vibe_check.config import ThresholdConfig
from vibe_check.recommend import DEFAULT_MODEL, ModelPhase

FEATURES = [0, 0, 0, 0, 0, 0.8, 0.9, 0.8, 0.9]


def record_many(store, count, score=0.85, level=4):
    state = None
    for _ in range(count):
        state = store.record(FEATURES, level, score)
    return state


class TestLoad:
    def test_missing_file_gives_default(self, tmp_path):
        state = CalibrationStore(str(tmp_path)).load()
        assert state.samples == []
        assert state.model == DEFAULT_MODEL
        assert state.ece == 0.0
        assert state.version == DEFAULT_VERSION
        assert state.phase() is ModelPhase.DEFAULT

    @pytest.mark.parametrize(
        "content",
        ["{broken", "[]", json.dumps({"samples": []}), json.dumps({"samples": "x", "weights": []})],
    )
    def test_corrupt_file_gives_default(self, tmp_path, content):
        store = CalibrationStore(str(tmp_path))
        store.path.parent.mkdir()
        store.path.write_text(content)
        assert store.load().samples == []

    @pytest.mark.parametrize(
        "key, value",
        [
            ("vibeScore", 7.5),
            ("vibeScore", -0.1),
            ("vibeScore", float("nan")),
            ("declaredLevel", 2.7),
            ("declaredLevel", "4"),
            ("outcome", "too_high"),
        ],
    )
    def test_out_of_range_sample_gives_default(self, tmp_path, key, value):
        store = CalibrationStore(str(tmp_path))
        store.record(FEATURES, 4, 0.85)
        data = json.loads(store.path.read_text())
        data["samples"][0][key] = value
        store.path.write_text(json.dumps(data))

        state = store.load()
        assert state.samples == []
        assert state.ece == 0.0

    @pytest.mark.parametrize("ece", [7.3, -0.5, float("inf")])
    def test_out_of_range_ece_gives_default(self, tmp_path, ece):
        store = CalibrationStore(str(tmp_path))
        store.record(FEATURES, 4, 0.85)
        data = json.loads(store.path.read_text())
        data["ece"] = ece
        store.path.write_text(json.dumps(data))
        assert store.load().phase() is ModelPhase.DEFAULT

    def test_whole_number_float_level_is_accepted(self, tmp_path):
        store = CalibrationStore(str(tmp_path))
        store.record(FEATURES, 4, 0.85)
        data = json.loads(store.path.read_text())
        data["samples"][0]["declaredLevel"] = 4.0
        store.path.write_text(json.dumps(data))
        assert store.load().samples[0].declared_level == 4

    def test_corrupt_file_is_overwritten_on_save(self, tmp_path):
        store = CalibrationStore(str(tmp_path))
        store.path.parent.mkdir()
        store.path.write_text("{broken")
        store.record(FEATURES, 3, 0.7)
        assert CalibrationStore(str(tmp_path)).load().sample_count == 1


class TestRecord:
    def test_round_trip(self, tmp_path):
        store = CalibrationStore(str(tmp_path))
        state = store.record(FEATURES, 4, 0.85)
        assert state.sample_count == 1
        assert state.samples[0].outcome.value == "correct"

        loaded = CalibrationStore(str(tmp_path)).load()
        assert loaded.to_dict() == state.to_dict()
        assert loaded.phase() is ModelPhase.COLLECTING

    def test_file_layout(self, tmp_path):
        CalibrationStore(str(tmp_path)).record(FEATURES, 2, 0.6)
        data = json.loads((tmp_path / ".vibe-check" / "calibration.json").read_text())
        assert set(data) == {"samples", "weights", "thresholds", "ece", "lastUpdated", "version"}
        assert data["samples"][0]["declaredLevel"] == 2
        assert (tmp_path / ".vibe-check" / ".gitignore").read_text() == "*\n"

    def test_no_temp_files_left(self, tmp_path):
        record_many(CalibrationStore(str(tmp_path)), 3)
        assert sorted(p.name for p in (tmp_path / ".vibe-check").iterdir()) == [".gitignore", "calibration.json"]


class TestRetrainPolicy:
    def test_retrains_on_tenth_sample(self, tmp_path):
        store = CalibrationStore(str(tmp_path))
        state = record_many(store, 9)
        assert state.version == DEFAULT_VERSION

        state = store.record(FEATURES, 4, 0.85)
        assert state.sample_count == 10
        assert state.version == TRAINED_VERSION
        assert state.model != DEFAULT_MODEL
        assert state.ece == pytest.approx(0.0)
        assert state.phase() is ModelPhase.CALIBRATED

    def test_high_stored_ece_keeps_retraining(self, tmp_path):
        """Once a retrain reports drift, every new sample retrains again."""
        store = CalibrationStore(str(tmp_path))
        state = record_many(store, 5, score=0.2, level=5)
        assert state.version == DEFAULT_VERSION

        state = record_many(store, 5, score=0.2, level=5)
        assert state.version == TRAINED_VERSION
        assert state.ece == pytest.approx(0.75)
        assert state.phase() is ModelPhase.DRIFTING

        after = store.record(FEATURES, 5, 0.2)
        assert after.model != state.model

    def test_never_below_minimum(self):
        state = CalibrationState(ece=0.9)
        assert not should_retrain(state)

    def test_custom_interval(self, tmp_path):
        thresholds = ThresholdConfig(retrain_sample_interval=3, min_samples_for_retrain=3)
        state = record_many(CalibrationStore(str(tmp_path), thresholds), 3)
        assert state.version == TRAINED_VERSION


class TestForceRetrain:
    def test_too_few_samples_is_a_no_op(self, tmp_path):
        store = CalibrationStore(str(tmp_path))
        record_many(store, 2)
        state = store.force_retrain()
        assert state.version == DEFAULT_VERSION
        assert state.sample_count == 2

    def test_retrains_from_default_model(self, tmp_path):
        store = CalibrationStore(str(tmp_path))
        record_many(store, 6)
        first = store.force_retrain()
        second = store.force_retrain()
        assert first.version == TRAINED_VERSION
        assert first.model == second.model

    def test_retrain_leaves_input_untouched(self, tmp_path):
        state = record_many(CalibrationStore(str(tmp_path)), 6)
        untrained = replace(state, model=DEFAULT_MODEL, version=DEFAULT_VERSION)
        retrained = retrain(untrained)
        assert untrained.model == DEFAULT_MODEL
        assert retrained.version == TRAINED_VERSION
