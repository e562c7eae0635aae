"""Tests for session history, baselines and baseline comparison."""

from datetime import timedelta

import pytest

from vibe_check.temporal.history import (
    MAX_RECORDS,
    MIN_VELOCITY_STD,
    Baseline,
    SessionHistoryStore,
    SessionRecord,
    calculate_baseline,
    compare_to_baseline,
    session_id_for,
    velocity_baseline,
)


def make_record(t0, index, commits=6, minutes=60, trust=90.0, rework=20.0):
    start = t0 + timedelta(days=index)
    return SessionRecord(
        id=session_id_for(start),
        started_at=start,
        ended_at=start + timedelta(minutes=minutes),
        commits=commits,
        trust_pass_rate=trust,
        rework_ratio=rework,
        spirals=0,
    )


BASELINE = Baseline(trust_pass_rate=80, rework_ratio=30, avg_commits=6, avg_duration=60)


class TestBaseline:
    def test_needs_five_sessions(self, t0):
        records = [make_record(t0, i) for i in range(4)]
        assert calculate_baseline(records) is None

    def test_mean_of_recent_sessions(self, t0):
        records = [make_record(t0, i, trust=100.0, rework=0.0) for i in range(10)]
        records += [make_record(t0, 10 + i, trust=80.0, rework=25.0) for i in range(20)]
        baseline = calculate_baseline(records)
        assert baseline == Baseline(trust_pass_rate=80, rework_ratio=25, avg_commits=6, avg_duration=60)

    def test_session_id_is_start_minute(self, t0):
        assert session_id_for(t0 + timedelta(seconds=42)) == "2024-01-15T09:00"


class TestCompareToBaseline:
    def test_without_baseline(self):
        comparison = compare_to_baseline(None, 90, 10, 5, 30)
        assert not comparison.has_baseline
        assert comparison.verdict is None

    def test_above(self):
        comparison = compare_to_baseline(BASELINE, 90, 30, 5, 30)
        assert comparison.verdict == "above"
        assert comparison.trust_delta == 10

    def test_rework_improvement_alone_is_above(self):
        comparison = compare_to_baseline(BASELINE, 80, 20, 5, 30)
        assert comparison.verdict == "above"

    def test_below_wins_over_above(self):
        """Worse rework outweighs better trust."""
        comparison = compare_to_baseline(BASELINE, 95, 45, 5, 30)
        assert comparison.verdict == "below"
        assert "rework" in comparison.message

    def test_both_worse(self):
        comparison = compare_to_baseline(BASELINE, 60, 50, 5, 30)
        assert comparison.verdict == "below"
        assert "break" in comparison.message

    def test_normal(self):
        comparison = compare_to_baseline(BASELINE, 82, 33, 5, 30)
        assert comparison.verdict == "normal"


class TestVelocityBaseline:
    def test_too_few_records(self, t0):
        assert velocity_baseline([make_record(t0, i) for i in range(4)]) is None

    def test_identical_sessions_floor_std(self, t0):
        """Six commits in an hour each time: mean 6/h, std floored."""
        baseline = velocity_baseline([make_record(t0, i) for i in range(5)])
        assert baseline.mean == pytest.approx(6.0)
        assert baseline.std == MIN_VELOCITY_STD

    def test_per_commit_floor(self, t0):
        """Short sessions are credited 10 minutes per commit."""
        records = [make_record(t0, i, commits=3, minutes=0) for i in range(5)]
        assert velocity_baseline(records).mean == pytest.approx(6.0)


class TestSessionHistoryStore:
    def test_missing_file_is_empty(self, tmp_path):
        history = SessionHistoryStore(str(tmp_path)).load()
        assert history.records == []
        assert history.baseline is None

    def test_corrupt_file_is_empty(self, tmp_path):
        store = SessionHistoryStore(str(tmp_path))
        store.path.parent.mkdir()
        store.path.write_text("{not json")
        assert store.load().records == []

    def test_record_round_trip(self, tmp_path, t0):
        store = SessionHistoryStore(str(tmp_path))
        store.record_session(t0, t0 + timedelta(minutes=45), 7, 85.0, 14.0, 1, vibe_score=0.8)

        history = SessionHistoryStore(str(tmp_path)).load()
        assert len(history.records) == 1
        record = history.records[0]
        assert record.id == "2024-01-15T09:00"
        assert record.duration_minutes == 45
        assert record.vibe_score == 0.8
        assert (tmp_path / ".vibe-check" / ".gitignore").exists()

    def test_upsert_by_start_minute(self, tmp_path, t0):
        store = SessionHistoryStore(str(tmp_path))
        store.record_session(t0, t0 + timedelta(minutes=10), 2, 100.0, 0.0, 0)
        history = store.record_session(t0, t0 + timedelta(minutes=40), 5, 80.0, 40.0, 1)
        assert len(history.records) == 1
        assert history.records[0].commits == 5

    def test_baseline_after_five_sessions(self, tmp_path, t0):
        store = SessionHistoryStore(str(tmp_path))
        for i in range(5):
            start = t0 + timedelta(days=i)
            history = store.record_session(start, start + timedelta(minutes=60), 6, 90.0, 20.0, 0)
        assert history.baseline == Baseline(trust_pass_rate=90, rework_ratio=20, avg_commits=6, avg_duration=60)
        assert store.compare(70, 20, 6, 60).verdict == "below"

    @pytest.mark.slow
    def test_keeps_most_recent_records(self, tmp_path, t0):
        store = SessionHistoryStore(str(tmp_path))
        for i in range(MAX_RECORDS + 5):
            start = t0 + timedelta(hours=i)
            history = store.record_session(start, start + timedelta(minutes=30), 3, 100.0, 0.0, 0)
        assert len(history.records) == MAX_RECORDS
        assert history.records[0].id == session_id_for(t0 + timedelta(hours=5))
