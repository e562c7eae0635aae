"""Per-repository session history and personal baselines.

Stored as ``.vibe-check/sessions.json``. Only the most recent
``MAX_RECORDS`` sessions are kept; a baseline exists once
``MIN_SESSIONS_FOR_BASELINE`` sessions have been recorded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Literal, Optional

from ..file_ops import DATA_DIR_NAME, atomic_write_json, data_dir, read_json
from ..logging_config import get_logger
from ..math import Statistics, round_int
from .models import VelocityBaseline, minutes_between, parse_iso, utc_now

logger = get_logger(__name__)

MAX_RECORDS = 100
MIN_SESSIONS_FOR_BASELINE = 5
BASELINE_WINDOW = 20
MIN_VELOCITY_STD = 0.5

Verdict = Literal["above", "below", "normal"]


@dataclass
class SessionRecord:
    id: str  # start time at minute precision
    started_at: datetime
    ended_at: datetime
    commits: int
    trust_pass_rate: float
    rework_ratio: float
    spirals: int
    vibe_score: Optional[float] = None

    @property
    def duration_minutes(self) -> float:
        return minutes_between(self.started_at, self.ended_at)

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "startedAt": self.started_at.isoformat(),
            "endedAt": self.ended_at.isoformat(),
            "commits": self.commits,
            "trustPassRate": self.trust_pass_rate,
            "reworkRatio": self.rework_ratio,
            "spirals": self.spirals,
        }
        if self.vibe_score is not None:
            data["vibeScore"] = self.vibe_score
        return data

    @classmethod
    def from_dict(cls, data: dict) -> SessionRecord:
        vibe_score = data.get("vibeScore")
        return cls(
            id=str(data["id"]),
            started_at=parse_iso(data["startedAt"]),
            ended_at=parse_iso(data["endedAt"]),
            commits=int(data["commits"]),
            trust_pass_rate=float(data["trustPassRate"]),
            rework_ratio=float(data["reworkRatio"]),
            spirals=int(data["spirals"]),
            vibe_score=float(vibe_score) if vibe_score is not None else None,
        )


@dataclass(frozen=True)
class Baseline:
    trust_pass_rate: int
    rework_ratio: int
    avg_commits: int
    avg_duration: int  # minutes

    def to_dict(self) -> dict:
        return {
            "trustPassRate": self.trust_pass_rate,
            "reworkRatio": self.rework_ratio,
            "avgCommits": self.avg_commits,
            "avgDuration": self.avg_duration,
        }


@dataclass
class SessionHistory:
    records: list[SessionRecord] = field(default_factory=list)
    baseline: Optional[Baseline] = None
    last_updated: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict:
        return {
            "sessions": [r.to_dict() for r in self.records],
            "baseline": self.baseline.to_dict() if self.baseline else None,
            "lastUpdated": self.last_updated.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> SessionHistory:
        records = [SessionRecord.from_dict(r) for r in data.get("sessions", [])]
        last_updated = data.get("lastUpdated")
        return cls(
            records=records,
            baseline=calculate_baseline(records),
            last_updated=parse_iso(last_updated) if last_updated else utc_now(),
        )


@dataclass(frozen=True)
class BaselineComparison:
    has_baseline: bool
    baseline: Optional[Baseline]
    trust_pass_rate: float
    rework_ratio: float
    commits: int
    duration_minutes: float
    trust_delta: Optional[float] = None  # positive = better than baseline
    rework_delta: Optional[float] = None  # negative = better than baseline
    verdict: Optional[Verdict] = None
    message: str = ""


def session_id_for(started_at: datetime) -> str:
    return started_at.isoformat()[:16]


def calculate_baseline(records: list[SessionRecord]) -> Optional[Baseline]:
    """Mean of the most recent sessions; None below the minimum count."""
    if len(records) < MIN_SESSIONS_FOR_BASELINE:
        return None

    recent = records[-BASELINE_WINDOW:]
    return Baseline(
        trust_pass_rate=round_int(Statistics.mean([r.trust_pass_rate for r in recent])),
        rework_ratio=round_int(Statistics.mean([r.rework_ratio for r in recent])),
        avg_commits=round_int(Statistics.mean([r.commits for r in recent])),
        avg_duration=round_int(Statistics.mean([r.duration_minutes for r in recent])),
    )


def compare_to_baseline(
    baseline: Optional[Baseline],
    trust_pass_rate: float,
    rework_ratio: float,
    commits: int,
    duration_minutes: float,
) -> BaselineComparison:
    """Classify the current session against the personal baseline."""
    if baseline is None:
        return BaselineComparison(
            has_baseline=False,
            baseline=None,
            trust_pass_rate=trust_pass_rate,
            rework_ratio=rework_ratio,
            commits=commits,
            duration_minutes=duration_minutes,
        )

    trust_delta = trust_pass_rate - baseline.trust_pass_rate
    rework_delta = rework_ratio - baseline.rework_ratio

    trust_better = trust_delta > 5
    trust_worse = trust_delta < -10
    rework_better = rework_delta < -5
    rework_worse = rework_delta > 10

    verdict: Verdict
    if trust_worse or rework_worse:
        verdict = "below"
        if trust_worse and rework_worse:
            message = "Rougher than usual - consider taking a break"
        elif trust_worse:
            message = "Trust lower than usual - slow down and verify"
        else:
            message = "More rework than usual - might be spiraling"
    elif trust_better or rework_better:
        verdict = "above"
        message = "Better than your usual - nice flow!"
    else:
        verdict = "normal"
        message = "Typical session for you"

    return BaselineComparison(
        has_baseline=True,
        baseline=baseline,
        trust_pass_rate=trust_pass_rate,
        rework_ratio=rework_ratio,
        commits=commits,
        duration_minutes=duration_minutes,
        trust_delta=trust_delta,
        rework_delta=rework_delta,
        verdict=verdict,
        message=message,
    )


def velocity_baseline(
    records: list[SessionRecord], min_minutes_per_commit: int = 10
) -> Optional[VelocityBaseline]:
    """Personal commits/hour distribution over recent sessions.

    Each session's active time is floored at ``min_minutes_per_commit`` per
    commit. Returns None below the minimum session count.
    """
    if len(records) < MIN_SESSIONS_FOR_BASELINE:
        return None

    velocities = []
    for record in records[-BASELINE_WINDOW:]:
        minutes = max(record.duration_minutes, record.commits * min_minutes_per_commit)
        if minutes <= 0:
            continue
        velocities.append(record.commits / (minutes / 60))

    if len(velocities) < MIN_SESSIONS_FOR_BASELINE:
        return None

    return VelocityBaseline(
        mean=Statistics.mean(velocities),
        std=max(Statistics.pstdev(velocities), MIN_VELOCITY_STD),
    )


class SessionHistoryStore:
    """Load, update and persist ``sessions.json`` for one repository."""

    def __init__(self, repo_path: str = ".", dir_name: str = DATA_DIR_NAME):
        self.path: Path = data_dir(repo_path, dir_name) / "sessions.json"

    def load(self) -> SessionHistory:
        """Read history; a missing or unreadable file yields an empty history."""
        if not self.path.exists():
            return SessionHistory()
        try:
            return SessionHistory.from_dict(read_json(self.path))
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Ignoring unreadable session history %s: %s", self.path, e)
            return SessionHistory()

    def save(self, history: SessionHistory) -> None:
        history.last_updated = utc_now()
        atomic_write_json(self.path, history.to_dict())

    def record_session(
        self,
        started_at: datetime,
        ended_at: datetime,
        commits: int,
        trust_pass_rate: float,
        rework_ratio: float,
        spirals: int,
        vibe_score: Optional[float] = None,
    ) -> SessionHistory:
        """Upsert a session by start minute, trim, recompute the baseline, save."""
        history = self.load()
        record_id = session_id_for(started_at)

        existing = next((r for r in history.records if r.id == record_id), None)
        if existing is not None:
            existing.ended_at = ended_at
            existing.commits = commits
            existing.trust_pass_rate = trust_pass_rate
            existing.rework_ratio = rework_ratio
            existing.spirals = spirals
            if vibe_score is not None:
                existing.vibe_score = vibe_score
        else:
            history.records.append(
                SessionRecord(
                    id=record_id,
                    started_at=started_at,
                    ended_at=ended_at,
                    commits=commits,
                    trust_pass_rate=trust_pass_rate,
                    rework_ratio=rework_ratio,
                    spirals=spirals,
                    vibe_score=vibe_score,
                )
            )

        history.records = history.records[-MAX_RECORDS:]
        history.baseline = calculate_baseline(history.records)
        self.save(history)
        return history

    def compare(
        self, trust_pass_rate: float, rework_ratio: float, commits: int, duration_minutes: float
    ) -> BaselineComparison:
        return compare_to_baseline(
            self.load().baseline, trust_pass_rate, rework_ratio, commits, duration_minutes
        )
