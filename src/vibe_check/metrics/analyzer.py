"""Run every metric over one commit set."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..config import AnalysisConfig
from ..math import Statistics, round_half_up
from ..temporal.fix_chains import FixChain, PatternSummary, calculate_pattern_summary, detect_fix_chains
from ..temporal.models import Commit, CommitType, FileStats, VelocityBaseline, sort_commits
from ..temporal.sessions import calculate_active_hours
from .code_stability import calculate_code_stability
from .file_churn import calculate_file_churn
from .flow import calculate_flow_efficiency
from .models import MetricResult, OverallRating, Rating, ScoreInputs
from .rework import calculate_rework_ratio
from .spirals import calculate_debug_spiral_duration
from .time_spiral import calculate_time_spiral
from .trust import calculate_trust_pass_rate
from .velocity import calculate_iteration_velocity
from .velocity_anomaly import calculate_velocity_anomaly


@dataclass(frozen=True)
class CommitCounts:
    total: int = 0
    feat: int = 0
    fix: int = 0
    docs: int = 0
    other: int = 0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "feat": self.feat,
            "fix": self.fix,
            "docs": self.docs,
            "other": self.other,
        }


@dataclass(frozen=True)
class SemanticMetrics:
    iteration_velocity: MetricResult
    rework_ratio: MetricResult
    trust_pass_rate: MetricResult
    debug_spiral_duration: MetricResult
    flow_efficiency: MetricResult

    def ratings(self) -> list[Rating]:
        return [
            self.iteration_velocity.rating,
            self.rework_ratio.rating,
            self.trust_pass_rate.rating,
            self.debug_spiral_duration.rating,
            self.flow_efficiency.rating,
        ]

    def to_dict(self) -> dict:
        return {
            "iteration_velocity": self.iteration_velocity.to_dict(),
            "rework_ratio": self.rework_ratio.to_dict(),
            "trust_pass_rate": self.trust_pass_rate.to_dict(),
            "debug_spiral_duration": self.debug_spiral_duration.to_dict(),
            "flow_efficiency": self.flow_efficiency.to_dict(),
        }


@dataclass
class VibeCheckResult:
    """Semantic analysis of one commit set."""

    period_from: Optional[datetime]
    period_to: Optional[datetime]
    active_hours: float
    commits: CommitCounts
    metrics: SemanticMetrics
    fix_chains: list[FixChain] = field(default_factory=list)
    patterns: PatternSummary = field(default_factory=PatternSummary)
    overall: OverallRating = OverallRating.HIGH

    def to_dict(self) -> dict:
        return {
            "period": {
                "from": self.period_from.isoformat() if self.period_from else None,
                "to": self.period_to.isoformat() if self.period_to else None,
                "active_hours": self.active_hours,
            },
            "commits": self.commits.to_dict(),
            "metrics": self.metrics.to_dict(),
            "fix_chains": [
                {
                    "component": c.component,
                    "commits": c.commits,
                    "duration": c.duration,
                    "is_spiral": c.is_spiral,
                    "pattern": c.pattern,
                    "first_commit": c.first_commit.isoformat(),
                    "last_commit": c.last_commit.isoformat(),
                }
                for c in self.fix_chains
            ],
            "patterns": self.patterns.to_dict(),
            "overall": self.overall.value,
        }


def count_commit_types(commits: Sequence[Commit]) -> CommitCounts:
    feat = sum(1 for c in commits if c.type is CommitType.FEATURE)
    fix = sum(1 for c in commits if c.type is CommitType.FIX)
    docs = sum(1 for c in commits if c.type is CommitType.DOCS)
    return CommitCounts(
        total=len(commits), feat=feat, fix=fix, docs=docs, other=len(commits) - feat - fix - docs
    )


def overall_rating(ratings: list[Rating]) -> OverallRating:
    """Mean rating score (elite=4 .. low=1) mapped back to a band."""
    if not ratings:
        return OverallRating.HIGH
    mean_score = Statistics.mean([r.score for r in ratings])
    if mean_score >= 3.5:
        return OverallRating.ELITE
    if mean_score >= 2.5:
        return OverallRating.HIGH
    if mean_score >= 1.5:
        return OverallRating.MEDIUM
    return OverallRating.LOW


def analyze_commits(
    commits: Sequence[Commit], config: Optional[AnalysisConfig] = None
) -> VibeCheckResult:
    """Compute the five semantic metrics, fix chains and overall rating.

    An empty commit set gives the neutral result for every metric with an
    overall rating of HIGH.
    """
    config = config or AnalysisConfig()
    ordered = sort_commits(commits)
    gap = config.session_gap_minutes
    per_commit = config.min_minutes_per_commit
    followup = config.thresholds.followup_window_minutes

    if not ordered:
        metrics = SemanticMetrics(
            iteration_velocity=calculate_iteration_velocity([]),
            rework_ratio=calculate_rework_ratio([]),
            trust_pass_rate=calculate_trust_pass_rate([]),
            debug_spiral_duration=calculate_debug_spiral_duration([]),
            flow_efficiency=calculate_flow_efficiency(0, []),
        )
        return VibeCheckResult(
            period_from=None,
            period_to=None,
            active_hours=0.0,
            commits=CommitCounts(),
            metrics=metrics,
        )

    active_hours = calculate_active_hours(ordered, gap, per_commit)
    chains = detect_fix_chains(ordered)

    metrics = SemanticMetrics(
        iteration_velocity=calculate_iteration_velocity(ordered, gap, per_commit),
        rework_ratio=calculate_rework_ratio(ordered),
        trust_pass_rate=calculate_trust_pass_rate(ordered, followup),
        debug_spiral_duration=calculate_debug_spiral_duration(chains),
        flow_efficiency=calculate_flow_efficiency(active_hours * 60, chains),
    )

    return VibeCheckResult(
        period_from=ordered[0].date,
        period_to=ordered[-1].date,
        active_hours=round_half_up(active_hours, 1),
        commits=count_commit_types(ordered),
        metrics=metrics,
        fix_chains=chains,
        patterns=calculate_pattern_summary(chains),
        overall=overall_rating(metrics.ratings()),
    )


def calculate_semantic_free_metrics(
    commits: Sequence[Commit],
    file_stats: Optional[FileStats] = None,
    baseline: Optional[VelocityBaseline] = None,
    config: Optional[AnalysisConfig] = None,
) -> ScoreInputs:
    """The four metrics that work without conventional commit messages."""
    config = config or AnalysisConfig()
    thresholds = config.thresholds
    stats = file_stats or FileStats()
    base = baseline or VelocityBaseline(thresholds.velocity_baseline_mean, thresholds.velocity_baseline_std)
    return ScoreInputs(
        file_churn=calculate_file_churn(
            commits,
            stats.files_per_commit,
            thresholds.churn_window_minutes,
            thresholds.churn_touch_threshold,
        ),
        time_spiral=calculate_time_spiral(commits, thresholds.rapid_commit_minutes),
        velocity_anomaly=calculate_velocity_anomaly(
            commits, base, config.session_gap_minutes, config.min_minutes_per_commit
        ),
        code_stability=calculate_code_stability(commits, stats.line_stats),
    )
