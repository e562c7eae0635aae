"""End-to-end tests for the public API against real git repositories."""

import pytest

from vibe_check.api import (
    analyze,
    list_sessions,
    load_session_history,
    recommend_level,
    record_calibration,
    retrain_calibration,
)
from vibe_check.exceptions import (
    InsufficientDataError,
    InvalidConfigError,
    InvalidLevelError,
    InvalidPathError,
)
from vibe_check.recommend import QuestionResponses


@pytest.fixture
def repo(git_repo, tmp_path, monkeypatch):
    """Feature, three auth fixes in 20 minutes, then a docs commit hours later."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    git_repo.commit(0, "feat(auth): add login", {"auth.py": "login\n"})
    git_repo.commit(10, "fix(auth): token refresh", {"auth.py": "login\nrefresh\n"})
    git_repo.commit(14, "fix(auth): token expiry", {"auth.py": "login\nexpiry\n"})
    git_repo.commit(20, "fix(auth): missing credential", {"auth.py": "login\nexpiry\ncred\n"})
    git_repo.commit(200, "docs: explain login", {"README.md": "login\n"})
    return git_repo.path


def test_missing_path(tmp_path):
    with pytest.raises(InvalidPathError):
        analyze(str(tmp_path / "missing"))


def test_file_is_not_a_repo_root(tmp_path):
    target = tmp_path / "file.txt"
    target.write_text("x")
    with pytest.raises(InvalidPathError):
        analyze(str(target))


class TestAnalyze:
    def test_counts_and_chains(self, repo):
        report = analyze(str(repo))
        result = report.result
        assert result.commits.total == 5
        assert result.commits.fix == 3
        assert result.commits.feat == 1
        assert result.commits.docs == 1
        assert [chain.component for chain in result.fix_chains] == ["auth"]
        assert report.sessions.stats.total_sessions == 2
        assert 0.0 <= report.vibe_score.value <= 1.0

    def test_auth_file_churn_detected(self, repo):
        report = analyze(str(repo))
        assert report.metrics.file_churn.value < 100

    def test_record_session(self, repo):
        report = analyze(str(repo), record_session=True)
        assert report.comparison is not None
        assert not report.comparison.has_baseline
        assert (repo / ".vibe-check" / "sessions.json").exists()

        history = load_session_history(str(repo))
        assert len(history.records) == 1
        assert history.records[0].commits == 1
        assert history.baseline is None

    def test_no_record_without_flag(self, repo):
        analyze(str(repo))
        assert not (repo / ".vibe-check").exists()


class TestSessions:
    def test_default_gap(self, repo):
        result = list_sessions(str(repo))
        assert [s.commit_count for s in result.sessions] == [4, 1]
        assert result.sessions[0].spiral_count == 1

    def test_custom_gap(self, repo):
        result = list_sessions(str(repo), gap_minutes=5)
        assert [s.commit_count for s in result.sessions] == [1, 2, 1, 1]

    def test_rejects_non_positive_gap(self, repo):
        with pytest.raises(InvalidConfigError):
            list_sessions(str(repo), gap_minutes=0)

    def test_empty_history(self, repo):
        history = load_session_history(str(repo))
        assert history.records == []


class TestLevel:
    def test_uses_git_metrics(self, repo):
        rec = recommend_level(QuestionResponses(blast_radius=-1), str(repo))
        assert rec.source == "ml"
        assert rec.reasoning[0] == "Based on git history + your answers"
        assert "Wide blast radius increases risk" in rec.reasoning
        assert len(rec.features) == 9
        assert 0 <= rec.prediction.level <= 5
        assert rec.sample_count == 0

    def test_fallback_on_short_history(self, git_repo):
        git_repo.commit(0, "feat: start")
        rec = recommend_level(path=str(git_repo.path))
        assert rec.source == "fallback"
        assert rec.features[5:] == [0.7, 0.7, 0.7, 0.7]


class TestCalibration:
    def test_records_sample(self, repo):
        state = record_calibration(3, str(repo))
        assert state.sample_count == 1
        assert state.samples[0].declared_level == 3
        assert (repo / ".vibe-check" / "calibration.json").exists()

        state = record_calibration(2, str(repo))
        assert state.sample_count == 2

    def test_rejects_invalid_level(self, repo):
        with pytest.raises(InvalidLevelError):
            record_calibration(6, str(repo))

    def test_needs_commits(self, git_repo):
        git_repo.commit(0, "feat: start")
        with pytest.raises(InsufficientDataError):
            record_calibration(3, str(git_repo.path))

    def test_strict_retrain(self, repo):
        record_calibration(3, str(repo))
        with pytest.raises(InsufficientDataError):
            retrain_calibration(str(repo), strict=True)
        assert not retrain_calibration(str(repo)).trained
