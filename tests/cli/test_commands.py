"""Smoke tests for the vibe-check CLI."""

import json

import pytest
from typer.testing import CliRunner

from vibe_check import __version__
from vibe_check.cli import app

runner = CliRunner()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """A plain directory (not a git repository) with no config files around."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "work"
    target.mkdir()
    return target


def invoke(path, *args):
    return runner.invoke(app, ["-C", str(path), *args])


class TestWithoutHistory:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_default_command_is_analyze(self, workdir):
        result = invoke(workdir)
        assert result.exit_code == 0
        assert "No commits found" in result.stdout

    def test_analyze_json(self, workdir):
        result = invoke(workdir, "analyze", "--json")
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["commits"]["total"] == 0
        assert data["overall"] == "HIGH"
        assert 0.0 <= data["vibe_score"]["value"] <= 1.0

    def test_level_falls_back_to_answers(self, workdir):
        result = invoke(workdir, "level", "--json", "--blast-radius", "-2")
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["source"] == "fallback"
        assert data["responses"]["blast_radius"] == -2
        assert data["features"][5:] == [0.7, 0.7, 0.7, 0.7]
        assert 0 <= data["level"] <= 5

    def test_level_rich(self, workdir):
        result = invoke(workdir, "level")
        assert result.exit_code == 0
        assert "Level" in result.stdout
        assert "Not enough git history" in result.stdout

    def test_level_rejects_out_of_range_answer(self, workdir):
        result = invoke(workdir, "level", "--reversibility", "3")
        assert result.exit_code == 2

    def test_calibrate_needs_commits(self, workdir):
        result = invoke(workdir, "calibrate", "3")
        assert result.exit_code == 1
        assert "Insufficient data" in result.stdout

    def test_calibrate_rejects_level(self, workdir):
        assert invoke(workdir, "calibrate", "9").exit_code == 2

    def test_retrain_without_samples(self, workdir):
        result = invoke(workdir, "retrain")
        assert result.exit_code == 0
        assert "Not retrained" in result.stdout
        assert invoke(workdir, "retrain", "--strict").exit_code == 1

    def test_sessions_json(self, workdir):
        result = invoke(workdir, "sessions", "--json")
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {
            "stats": {
                "total_sessions": 0,
                "total_commits": 0,
                "avg_commits_per_session": 0.0,
                "avg_duration_minutes": 0.0,
                "median_duration_minutes": 0.0,
                "longest_session_minutes": 0.0,
                "shortest_session_minutes": 0.0,
            },
            "sessions": [],
        }

    def test_sessions_history_empty(self, workdir):
        result = invoke(workdir, "sessions", "--history")
        assert result.exit_code == 0
        assert "No sessions recorded yet" in result.stdout


class TestWithHistory:
    @pytest.fixture
    def repo(self, git_repo, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.chdir(tmp_path)
        git_repo.commit(0, "feat(auth): add login", {"auth.py": "login\n"})
        git_repo.commit(10, "fix(auth): token refresh", {"auth.py": "login\nrefresh\n"})
        git_repo.commit(14, "fix(auth): token expiry", {"auth.py": "login\nexpiry\n"})
        git_repo.commit(20, "fix(auth): missing credential", {"auth.py": "login\nexpiry\ncred\n"})
        git_repo.commit(200, "docs: explain login", {"README.md": "login\n"})
        return git_repo.path

    def test_analyze_rich(self, repo):
        result = invoke(repo, "analyze")
        assert result.exit_code == 0
        assert "Semantic Metrics" in result.stdout
        assert "Fix Chains" in result.stdout

    def test_analyze_record(self, repo):
        result = invoke(repo, "analyze", "--json", "--record")
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["commits"]["fix"] == 3
        assert data["baseline_comparison"]["has_baseline"] is False
        assert (repo / ".vibe-check" / "sessions.json").exists()

    def test_sessions(self, repo):
        result = invoke(repo, "sessions", "--json")
        data = json.loads(result.stdout)
        assert [s["commit_count"] for s in data["sessions"]] == [4, 1]
        assert data["sessions"][0]["spiral_count"] == 1

    def test_level_uses_metrics(self, repo):
        result = invoke(repo, "level", "--json", "--since", "2000-01-01")
        data = json.loads(result.stdout)
        assert data["source"] == "ml"

    def test_calibrate(self, repo):
        result = invoke(repo, "calibrate", "3", "--since", "2000-01-01", "--json")
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["sample_count"] == 1
        assert data["phase"] == "collecting"
        assert data["sample"]["declaredLevel"] == 3
