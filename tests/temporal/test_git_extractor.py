"""Tests for git log extraction and conventional-commit parsing."""

import io
import subprocess
from datetime import datetime, timezone

import pytest

from vibe_check.temporal.git_extractor import GitExtractor, make_commit, parse_conventional
from vibe_check.temporal.models import CommitType, LineStats

SEP = "\x1f"


def header(hash_char: str, ts: int, subject: str, author: str = "Ada") -> str:
    return SEP.join([hash_char * 40, str(ts), author, subject])


class TestParseConventional:
    @pytest.mark.parametrize(
        "message, expected_type, expected_scope",
        [
            ("feat(api): add endpoint", CommitType.FEATURE, "api"),
            ("fix: handle null", CommitType.FIX, None),
            ("FIX(Auth): upper case prefix", CommitType.FIX, "Auth"),
            ("docs: readme", CommitType.DOCS, None),
            ("wip(core): unknown prefix", CommitType.OTHER, "core"),
            ("Merge branch 'main'", CommitType.OTHER, None),
            ("fix:no space", CommitType.FIX, None),
        ],
    )
    def test_classification(self, message, expected_type, expected_scope):
        commit_type, scope = parse_conventional(message)
        assert commit_type is expected_type
        assert scope == expected_scope

    def test_make_commit(self):
        commit = make_commit("a" * 40, 1705309200, "Ada", "feat(ui): button")
        assert commit.hash == "aaaaaaa"
        assert commit.date == datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)
        assert commit.type is CommitType.FEATURE
        assert commit.scope == "ui"
        assert commit.author == "Ada"


class TestParseLog:
    """Tests for GitExtractor._parse_log on synthetic output."""

    def test_headers_and_numstat(self, tmp_path):
        raw = "\n".join(
            [
                header("b", 1705312800, "fix(api): null check"),
                "",
                "3\t1\tsrc/api.py",
                "-\t-\tassets/logo.png",
                header("a", 1705309200, "feat(api): add endpoint"),
                "",
                "10\t0\tsrc/api.py",
                "5\t0\ttests/test_api.py",
                header("c", 1705309100, "Merge branch 'main'"),
            ]
        )
        commits, stats = GitExtractor(str(tmp_path))._parse_log(raw)

        assert [c.hash for c in commits] == ["bbbbbbb", "aaaaaaa", "ccccccc"]
        assert stats.files_per_commit["bbbbbbb"] == ["src/api.py", "assets/logo.png"]
        assert stats.line_stats["bbbbbbb"] == LineStats(additions=3, deletions=1)
        assert stats.line_stats["aaaaaaa"] == LineStats(additions=15, deletions=0)
        # merge commits have no numstat but are kept
        assert stats.files_per_commit["ccccccc"] == []

    def test_garbage_before_first_header_is_ignored(self, tmp_path):
        raw = "1\t1\tstray.py\n" + header("d", 1705309200, "chore: bump")
        commits, stats = GitExtractor(str(tmp_path))._parse_log(raw)
        assert len(commits) == 1
        assert stats.files_per_commit == {"ddddddd": []}

    def test_build_command(self, tmp_path):
        cmd = GitExtractor(str(tmp_path), max_commits=50)._build_command("1 week ago", None)
        assert "-n50" in cmd
        assert "--since=1 week ago" in cmd
        assert not any(part.startswith("--until") for part in cmd)


class TestExtract:
    def test_not_a_repository(self, tmp_path):
        """A plain directory yields an empty result, not an error."""
        result = GitExtractor(str(tmp_path)).extract()
        assert result.total_commits == 0
        assert result.file_stats.is_empty

    def test_real_repository(self, git_repo):
        git_repo.commit(0, "feat(core): start", {"core.py": "a\nb\n"})
        git_repo.commit(15, "fix(core): typo", {"core.py": "a\nc\n"})
        git_repo.commit(30, "docs: notes", {"NOTES.md": "hello\n"})

        result = GitExtractor(str(git_repo.path)).extract()

        assert [c.message for c in result.commits] == [
            "feat(core): start",
            "fix(core): typo",
            "docs: notes",
        ]
        assert [c.type for c in result.commits] == [CommitType.FEATURE, CommitType.FIX, CommitType.DOCS]
        fix = result.commits[1]
        assert result.file_stats.files_per_commit[fix.hash] == ["core.py"]
        assert result.file_stats.line_stats[fix.hash] == LineStats(additions=1, deletions=1)

    def test_empty_repository(self, git_repo):
        """A repository without commits makes git log fail; the result is empty."""
        assert GitExtractor(str(git_repo.path)).extract().total_commits == 0

    def test_timeout_kills_git(self, tmp_path, monkeypatch):
        """A git log that never exits is killed and yields no output."""
        started = []

        class HangingGit:
            def __init__(self, *args, **kwargs):
                self.stdout = io.StringIO("")
                self.stderr = io.StringIO("")
                self.returncode = None
                self.killed = False
                started.append(self)

            def wait(self, timeout=None):
                if timeout is not None and not self.killed:
                    raise subprocess.TimeoutExpired("git", timeout)
                self.returncode = -9
                return self.returncode

            def kill(self):
                self.killed = True

        monkeypatch.setattr(subprocess, "Popen", HangingGit)
        extractor = GitExtractor(str(tmp_path), timeout_seconds=1)

        assert extractor._run_git_log(None, None) is None
        assert len(started) == 1
        assert started[0].killed
        assert started[0].returncode == -9
