"""Data models for commit-stream analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class CommitType(str, Enum):
    """Conventional-commit classification of a commit."""

    FEATURE = "feat"
    FIX = "fix"
    DOCS = "docs"
    CHORE = "chore"
    REFACTOR = "refactor"
    TEST = "test"
    STYLE = "style"
    OTHER = "other"

    @classmethod
    def from_prefix(cls, prefix: str) -> "CommitType":
        """Map a conventional prefix to a type; unknown prefixes are OTHER."""
        normalized = prefix.lower()
        for member in cls:
            if member is not cls.OTHER and member.value == normalized:
                return member
        return cls.OTHER


@dataclass(frozen=True)
class Commit:
    hash: str  # short hash
    date: datetime  # timezone-aware
    message: str  # first line only
    type: CommitType = CommitType.OTHER
    scope: Optional[str] = None
    author: str = ""

    @property
    def is_fix(self) -> bool:
        return self.type is CommitType.FIX


@dataclass(frozen=True)
class LineStats:
    additions: int = 0
    deletions: int = 0


@dataclass
class FileStats:
    """Per-commit touched files and line counts, keyed by short hash."""

    files_per_commit: dict[str, list[str]] = field(default_factory=dict)
    line_stats: dict[str, LineStats] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.files_per_commit and not self.line_stats


@dataclass
class ExtractionResult:
    commits: list[Commit]  # oldest first
    file_stats: FileStats

    @property
    def total_commits(self) -> int:
        return len(self.commits)


def sort_commits(commits) -> list[Commit]:
    """Return commits ordered oldest first (stable for equal timestamps)."""
    return sorted(commits, key=lambda c: c.date)


def minutes_between(earlier: datetime, later: datetime) -> float:
    """Signed gap in fractional minutes."""
    return (later - earlier).total_seconds() / 60.0


def whole_minutes_between(earlier: datetime, later: datetime) -> int:
    """Signed gap in whole minutes, truncated toward zero."""
    return int(minutes_between(earlier, later))


@dataclass(frozen=True)
class VelocityBaseline:
    """Personal commits-per-hour distribution."""

    mean: float = 3.0
    std: float = 1.5


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing 'Z' for UTC."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
