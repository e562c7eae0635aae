"""Session segmentation by inactivity gap, and active-time accounting."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..math import Statistics, round_half_up
from .fix_chains import FixChain, detect_fix_chains
from .models import Commit, minutes_between, sort_commits, whole_minutes_between

DEFAULT_SESSION_GAP_MINUTES = 90
ACTIVE_TIME_GAP_MINUTES = 120
MIN_MINUTES_PER_COMMIT = 10
# Credited for a lone commit so velocity never divides by zero
MIN_ACTIVE_HOURS = 0.1


@dataclass
class Session:
    """A contiguous run of commits with rollups computed at construction."""

    session_id: int
    commits: list[Commit]
    start: datetime = field(init=False)
    end: datetime = field(init=False)
    duration_minutes: float = field(init=False)
    fix_count: int = field(init=False)
    rework_ratio: float = field(init=False)  # percent, 1 decimal
    fix_chains: list[FixChain] = field(init=False)
    spiral_count: int = field(init=False)

    def __post_init__(self) -> None:
        if not self.commits:
            raise ValueError("a session needs at least one commit")
        self.start = self.commits[0].date
        self.end = self.commits[-1].date
        self.duration_minutes = round_half_up(minutes_between(self.start, self.end), 1)
        self.fix_count = sum(1 for c in self.commits if c.is_fix)
        self.rework_ratio = round_half_up(self.fix_count / len(self.commits) * 100, 1)
        self.fix_chains = detect_fix_chains(self.commits)
        self.spiral_count = sum(1 for c in self.fix_chains if c.is_spiral)

    @property
    def commit_count(self) -> int:
        return len(self.commits)

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "duration_minutes": self.duration_minutes,
            "commit_count": self.commit_count,
            "fix_count": self.fix_count,
            "rework_ratio": self.rework_ratio,
            "spiral_count": self.spiral_count,
        }


@dataclass(frozen=True)
class SessionStats:
    total_sessions: int = 0
    total_commits: int = 0
    avg_commits_per_session: float = 0.0
    avg_duration_minutes: float = 0.0
    median_duration_minutes: float = 0.0
    longest_session_minutes: float = 0.0
    shortest_session_minutes: float = 0.0

    @classmethod
    def from_sessions(cls, sessions: list[Session]) -> SessionStats:
        if not sessions:
            return cls()

        total_commits = sum(s.commit_count for s in sessions)
        durations = sorted(s.duration_minutes for s in sessions)
        return cls(
            total_sessions=len(sessions),
            total_commits=total_commits,
            avg_commits_per_session=round_half_up(total_commits / len(sessions), 1),
            avg_duration_minutes=round_half_up(Statistics.mean(durations), 1),
            median_duration_minutes=round_half_up(Statistics.median(durations), 1),
            longest_session_minutes=durations[-1],
            shortest_session_minutes=durations[0],
        )

    def to_dict(self) -> dict:
        return {
            "total_sessions": self.total_sessions,
            "total_commits": self.total_commits,
            "avg_commits_per_session": self.avg_commits_per_session,
            "avg_duration_minutes": self.avg_duration_minutes,
            "median_duration_minutes": self.median_duration_minutes,
            "longest_session_minutes": self.longest_session_minutes,
            "shortest_session_minutes": self.shortest_session_minutes,
        }


@dataclass
class SessionDetectionResult:
    sessions: list[Session]
    stats: SessionStats
    analysis_range: Optional[tuple[datetime, datetime]] = None  # None for no commits


def detect_sessions(
    commits: Iterable[Commit], gap_threshold_minutes: float = DEFAULT_SESSION_GAP_MINUTES
) -> SessionDetectionResult:
    """Partition commits into sessions.

    Commits are sorted oldest first. A new session starts whenever the gap
    to the previous commit strictly exceeds ``gap_threshold_minutes``; the
    final session is always emitted. Every commit lands in exactly one
    session.

    Args:
        commits: Commits in any order
        gap_threshold_minutes: Inactivity gap that closes a session

    Returns:
        Sessions numbered from 1, their stats, and the analysed time range
    """
    ordered = sort_commits(commits)
    if not ordered:
        return SessionDetectionResult(sessions=[], stats=SessionStats())

    sessions: list[Session] = []
    current: list[Commit] = [ordered[0]]

    for previous, commit in zip(ordered, ordered[1:]):
        if minutes_between(previous.date, commit.date) > gap_threshold_minutes:
            sessions.append(Session(session_id=len(sessions) + 1, commits=current))
            current = [commit]
        else:
            current.append(commit)

    sessions.append(Session(session_id=len(sessions) + 1, commits=current))

    return SessionDetectionResult(
        sessions=sessions,
        stats=SessionStats.from_sessions(sessions),
        analysis_range=(ordered[0].date, ordered[-1].date),
    )


def calculate_active_hours(
    commits: Iterable[Commit],
    session_gap_minutes: int = ACTIVE_TIME_GAP_MINUTES,
    min_minutes_per_commit: int = MIN_MINUTES_PER_COMMIT,
) -> float:
    """Hours of active work: summed session spans in whole minutes.

    The total is floored at ``min_minutes_per_commit`` per commit to credit
    the work that happens before each commit.
    """
    ordered = sort_commits(commits)
    if len(ordered) < 2:
        return MIN_ACTIVE_HOURS

    total_minutes = 0
    session_start = ordered[0].date
    for previous, commit in zip(ordered, ordered[1:]):
        if whole_minutes_between(previous.date, commit.date) > session_gap_minutes:
            total_minutes += whole_minutes_between(session_start, previous.date)
            session_start = commit.date
    total_minutes += whole_minutes_between(session_start, ordered[-1].date)

    return max(total_minutes, len(ordered) * min_minutes_per_commit) / 60
