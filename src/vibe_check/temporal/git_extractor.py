"""Extract commits and per-commit diff stats via git subprocess."""

import re
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..logging_config import get_logger
from .models import Commit, CommitType, ExtractionResult, FileStats, LineStats

logger = get_logger(__name__)

SHORT_HASH_LENGTH = 7

# type(scope): description
_CONVENTIONAL_RE = re.compile(r"^(\w+)(?:\(([^)]+)\))?:\s*(.+)")


def parse_conventional(message: str) -> tuple[CommitType, Optional[str]]:
    """Classify a commit subject by its conventional prefix.

    Unrecognised prefixes map to OTHER; the scope is kept whenever the
    subject has the conventional shape, even for an unrecognised prefix.
    """
    match = _CONVENTIONAL_RE.match(message)
    if not match:
        return CommitType.OTHER, None
    raw_type, raw_scope = match.group(1), match.group(2)
    return CommitType.from_prefix(raw_type), raw_scope or None


def make_commit(
    full_hash: str, timestamp: int, author: str, subject: str
) -> Commit:
    """Build a Commit from raw log fields."""
    message = subject.split("\n")[0]
    commit_type, scope = parse_conventional(message)
    return Commit(
        hash=full_hash[:SHORT_HASH_LENGTH],
        date=datetime.fromtimestamp(timestamp, tz=timezone.utc),
        message=message,
        type=commit_type,
        scope=scope,
        author=author,
    )


class GitExtractor:
    """Parse `git log --numstat` into commits plus per-commit file/line stats."""

    def __init__(self, repo_path: str, max_commits: int = 5000, timeout_seconds: int = 30):
        self.repo_path = str(Path(repo_path).resolve())
        self.max_commits = max_commits
        self.timeout_seconds = timeout_seconds

    def extract(self, since: Optional[str] = None, until: Optional[str] = None) -> ExtractionResult:
        """Read the commit stream. Any git failure yields an empty result."""
        empty = ExtractionResult(commits=[], file_stats=FileStats())

        if not self.is_git_repo():
            logger.info("Not a git repository: %s", self.repo_path)
            return empty

        raw = self._run_git_log(since, until)
        if raw is None:
            return empty

        commits, file_stats = self._parse_log(raw)
        # git log is newest first
        commits.reverse()
        logger.debug("Extracted %d commits from %s", len(commits), self.repo_path)
        return ExtractionResult(commits=commits, file_stats=file_stats)

    def is_git_repo(self) -> bool:
        try:
            result = subprocess.run(
                ["git", "-C", self.repo_path, "rev-parse", "--git-dir"],
                capture_output=True,
                text=True,
                timeout=5,
            )
            return result.returncode == 0
        except (FileNotFoundError, subprocess.TimeoutExpired):
            return False

    # Maximum git log output size (50MB) to prevent OOM on huge repos
    _MAX_OUTPUT_BYTES = 50 * 1024 * 1024

    def _build_command(self, since: Optional[str], until: Optional[str]) -> list[str]:
        cmd = [
            "git",
            "-C",
            self.repo_path,
            "log",
            "--format=%H%x1f%at%x1f%an%x1f%s",
            "--numstat",
        ]
        if self.max_commits:
            cmd.append(f"-n{self.max_commits}")
        if since:
            cmd.append(f"--since={since}")
        if until:
            cmd.append(f"--until={until}")
        return cmd

    def _run_git_log(self, since: Optional[str], until: Optional[str]) -> Optional[str]:
        try:
            proc = subprocess.Popen(
                self._build_command(since, until),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
            try:
                chunks = []
                total_size = 0
                stdout = proc.stdout
                if stdout is None:
                    return None
                while True:
                    chunk = stdout.read(1024 * 1024)
                    if not chunk:
                        break
                    total_size += len(chunk)
                    if total_size > self._MAX_OUTPUT_BYTES:
                        logger.warning(
                            "git log output exceeded %dMB limit, truncating",
                            self._MAX_OUTPUT_BYTES // (1024 * 1024),
                        )
                        proc.kill()
                        break
                    chunks.append(chunk)

                try:
                    proc.wait(timeout=self.timeout_seconds)
                except subprocess.TimeoutExpired:
                    proc.kill()
                    proc.wait()
                    logger.warning("git log timed out after %ds", self.timeout_seconds)
                    return None
                if proc.returncode != 0 and proc.returncode != -9:  # -9 = killed
                    stderr = proc.stderr.read() if proc.stderr else ""
                    logger.warning("git log failed: %s", stderr.strip())
                    return None
                return "".join(chunks)
            finally:
                if proc.stdout:
                    proc.stdout.close()
                if proc.stderr:
                    proc.stderr.close()
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            logger.warning("git log error: %s", e)
            return None

    # 40-char hex hash, unix timestamp, author name, subject (unit-separated)
    _HEADER_RE = re.compile(r"^[0-9a-f]{40}\x1f\d+\x1f[^\x1f]*\x1f.*$")

    def _parse_log(self, raw: str) -> tuple[list[Commit], FileStats]:
        """Parse header lines and the numstat lines that follow them.

        Merge commits have no numstat lines and are still kept as commits.
        Binary files report '-' counts and contribute zero lines.
        """
        commits: list[Commit] = []
        file_stats = FileStats()
        current: Optional[Commit] = None

        for line in raw.split("\n"):
            line = line.rstrip("\r")
            if not line.strip():
                continue

            if self._HEADER_RE.match(line):
                full_hash, ts, author, subject = line.split("\x1f", 3)
                try:
                    current = make_commit(full_hash, int(ts), author, subject)
                except (ValueError, OverflowError, OSError):
                    logger.debug("Skipping unparsable git header: %r", line)
                    current = None
                    continue
                commits.append(current)
                file_stats.files_per_commit.setdefault(current.hash, [])
                file_stats.line_stats.setdefault(current.hash, LineStats())
            elif current is not None:
                self._add_numstat(file_stats, current.hash, line)

        return commits, file_stats

    @staticmethod
    def _add_numstat(file_stats: FileStats, short_hash: str, line: str) -> None:
        parts = line.split("\t", 2)
        if len(parts) != 3:
            return
        added, deleted, path = parts
        previous = file_stats.line_stats.get(short_hash, LineStats())
        file_stats.line_stats[short_hash] = LineStats(
            additions=previous.additions + (int(added) if added.isdigit() else 0),
            deletions=previous.deletions + (int(deleted) if deleted.isdigit() else 0),
        )
        file_stats.files_per_commit.setdefault(short_hash, []).append(path.strip())
