"""Shared test fixtures for vibe-check tests."""

import itertools
import os
import shutil
import subprocess
from datetime import datetime, timedelta, timezone

import pytest

from vibe_check.temporal.git_extractor import parse_conventional
from vibe_check.temporal.models import Commit

T0 = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def t0():
    """Fixed, timezone-aware start of the synthetic commit stream."""
    return T0


@pytest.fixture
def commit_at():
    """Factory: commit_at(minutes, message) -> Commit at T0 + minutes.

    Type and scope are parsed from the message the same way the git
    extractor does. Hashes are unique and increasing.
    """
    counter = itertools.count(1)

    def make(minutes: float, message: str, author: str = "dev") -> Commit:
        commit_type, scope = parse_conventional(message)
        return Commit(
            hash=f"{next(counter):07x}",
            date=T0 + timedelta(minutes=minutes),
            message=message,
            type=commit_type,
            scope=scope,
            author=author,
        )

    return make


@pytest.fixture
def healthy_commits(commit_at):
    """A calm feature session: 6 commits 20 minutes apart, one unrelated fix."""
    return [
        commit_at(0, "feat(api): add users endpoint"),
        commit_at(20, "feat(api): add pagination"),
        commit_at(40, "test(api): cover pagination"),
        commit_at(60, "docs: describe users endpoint"),
        commit_at(80, "fix(ui): align header"),
        commit_at(100, "feat(ui): add avatar"),
    ]


@pytest.fixture
def spiral_commits(commit_at):
    """A feature followed by a four-commit auth debugging spiral."""
    return [
        commit_at(0, "feat(auth): add oauth login"),
        commit_at(10, "fix(auth): token refresh"),
        commit_at(14, "fix(auth): token expiry"),
        commit_at(20, "fix(auth): handle missing credential"),
        commit_at(45, "fix(auth): retry token exchange"),
    ]


class GitRepo:
    """Throwaway git repository with commits at chosen times."""

    def __init__(self, path):
        self.path = path
        self._git("init", "-q")
        self._git("config", "user.name", "Test Dev")
        self._git("config", "user.email", "dev@example.com")
        self._git("config", "commit.gpgsign", "false")

    def _git(self, *args, env=None):
        subprocess.run(["git", "-C", str(self.path), *args], check=True, capture_output=True, env=env)

    def commit(self, minutes: float, message: str, files=None):
        """Commit ``files`` (name -> content) at T0 + minutes."""
        for name, content in (files or {f"file{minutes:g}.txt": message}).items():
            target = self.path / name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
            self._git("add", name)
        stamp = (T0 + timedelta(minutes=minutes)).isoformat()
        env = {**os.environ, "GIT_AUTHOR_DATE": stamp, "GIT_COMMITTER_DATE": stamp}
        self._git("commit", "-q", "--allow-empty", "-m", message, env=env)


@pytest.fixture
def git_repo(tmp_path):
    """Empty git repository in a temporary directory."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    repo = tmp_path / "repo"
    repo.mkdir()
    return GitRepo(repo)
