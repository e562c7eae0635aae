"""Public API for vibe-check.

Each entry point loads configuration, reads the commit stream of a
repository and runs the analytics pipeline over it.

Example:
    >>> from vibe_check import analyze
    >>>
    >>> report = analyze("/path/to/repo", since="1 week ago")
    >>> report.vibe_score.value
    0.87
    >>>
    >>> from vibe_check.api import recommend_level
    >>> from vibe_check.recommend import QuestionResponses
    >>> rec = recommend_level(QuestionResponses(blast_radius=-1), "/path/to/repo")
    >>> rec.prediction.level
    3
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional

from .calibration import CalibrationState, CalibrationStore, expected_range
from .config import AnalysisConfig, load_config
from .exceptions import InsufficientDataError, InvalidConfigError, InvalidPathError
from .logging_config import get_logger
from .metrics import (
    ScoreInputs,
    VibeCheckResult,
    analyze_commits,
    calculate_rework_ratio,
    calculate_semantic_free_metrics,
    calculate_trust_pass_rate,
)
from .recommend import (
    ModelPhase,
    Prediction,
    QuestionResponses,
    build_features,
    calculate_base_level,
    predict_with_confidence,
)
from .score import ScoreWeights, VibeScore, calculate_vibe_score
from .temporal import (
    BaselineComparison,
    Commit,
    ExtractionResult,
    GitExtractor,
    SessionDetectionResult,
    SessionHistory,
    SessionHistoryStore,
    detect_sessions,
    velocity_baseline,
)

logger = get_logger(__name__)

Source = Literal["ml", "fallback"]


@dataclass
class AnalysisReport:
    """Everything computed for one repository and time range."""

    path: str
    result: VibeCheckResult
    sessions: SessionDetectionResult
    metrics: ScoreInputs
    vibe_score: VibeScore
    comparison: Optional[BaselineComparison] = None

    def to_dict(self) -> dict:
        data = self.result.to_dict()
        data["sessions"] = {
            "stats": self.sessions.stats.to_dict(),
            "sessions": [s.to_dict() for s in self.sessions.sessions],
        }
        data["semantic_free_metrics"] = self.metrics.to_dict()
        data["vibe_score"] = self.vibe_score.to_dict()
        if self.comparison is not None:
            data["baseline_comparison"] = {
                "has_baseline": self.comparison.has_baseline,
                "verdict": self.comparison.verdict,
                "message": self.comparison.message,
                "trust_delta": self.comparison.trust_delta,
                "rework_delta": self.comparison.rework_delta,
            }
        return data


@dataclass
class LevelRecommendation:
    responses: QuestionResponses
    features: list[float]
    prediction: Prediction
    base_level: int
    phase: ModelPhase
    sample_count: int
    ece: float
    source: Source
    reasoning: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "level": self.prediction.level,
            "confidence": self.prediction.confidence,
            "ci": list(self.prediction.ci),
            "probs": list(self.prediction.probs),
            "base_level": self.base_level,
            "responses": self.responses.to_dict(),
            "features": self.features,
            "phase": self.phase.value,
            "sample_count": self.sample_count,
            "ece": self.ece,
            "source": self.source,
            "reasoning": list(self.reasoning),
        }


def _resolve_repo(path: str) -> Path:
    repo = Path(path)
    if not repo.exists():
        raise InvalidPathError(repo, "path does not exist")
    if not repo.is_dir():
        raise InvalidPathError(repo, "not a directory")
    return repo


def _extract(
    repo: Path, config: AnalysisConfig, since: Optional[str], until: Optional[str]
) -> ExtractionResult:
    extractor = GitExtractor(
        str(repo), max_commits=config.git_max_commits, timeout_seconds=config.git_timeout_seconds
    )
    extraction = extractor.extract(since=since, until=until)
    logger.info("Read %d commits from %s", extraction.total_commits, repo)
    return extraction


def _score(
    repo: Path, config: AnalysisConfig, extraction: ExtractionResult
) -> tuple[ScoreInputs, VibeScore]:
    history = SessionHistoryStore(str(repo), config.data_dir).load()
    baseline = velocity_baseline(history.records, config.min_minutes_per_commit)
    if baseline is not None:
        logger.debug("Using personal velocity baseline %.2f +- %.2f", baseline.mean, baseline.std)

    metrics = calculate_semantic_free_metrics(
        extraction.commits, extraction.file_stats, baseline, config
    )
    weights = ScoreWeights.from_thresholds(config.thresholds)
    return metrics, calculate_vibe_score(metrics, weights)


def analyze(
    path: str = ".",
    since: Optional[str] = None,
    until: Optional[str] = None,
    config_file: Optional[Path] = None,
    record_session: bool = False,
    **overrides,
) -> AnalysisReport:
    """Analyze the commit history of a repository.

    Args:
        path: Repository root (default: current directory)
        since: Git date expression for the start of the range (e.g. "1 week ago")
        until: Git date expression for the end of the range
        config_file: Optional explicit config file path
        record_session: Store the most recent session in the session history
            and compare it with the personal baseline
        **overrides: Configuration overrides (e.g. session_gap_minutes=60)

    Returns:
        AnalysisReport with semantic metrics, sessions, semantic-free
        metrics and the VibeScore

    Raises:
        VibeCheckError: If configuration is invalid
        InvalidPathError: If path is not an existing directory
    """
    repo = _resolve_repo(path)
    config = load_config(config_file=config_file, **overrides)
    logger.debug("Configuration loaded: %s mode", config.verbosity)

    extraction = _extract(repo, config, since, until)
    commits = extraction.commits

    result = analyze_commits(commits, config)
    sessions = detect_sessions(commits, config.session_detection_gap_minutes)
    metrics, vibe_score = _score(repo, config, extraction)

    comparison = None
    if record_session and len(commits) >= config.min_commits_for_metrics:
        comparison = _record_latest_session(repo, config, commits, vibe_score)

    logger.info(
        "Analysis complete: %d commits, %d sessions, VibeScore %.2f",
        len(commits),
        sessions.stats.total_sessions,
        vibe_score.value,
    )
    return AnalysisReport(
        path=str(repo),
        result=result,
        sessions=sessions,
        metrics=metrics,
        vibe_score=vibe_score,
        comparison=comparison,
    )


def _record_latest_session(
    repo: Path, config: AnalysisConfig, commits: list[Commit], vibe_score: VibeScore
) -> BaselineComparison:
    latest = detect_sessions(commits, config.session_gap_minutes).sessions[-1]
    trust = calculate_trust_pass_rate(latest.commits, config.thresholds.followup_window_minutes).value
    rework = calculate_rework_ratio(latest.commits).value

    store = SessionHistoryStore(str(repo), config.data_dir)
    # Baseline excludes the session being recorded
    comparison = store.compare(trust, rework, latest.commit_count, latest.duration_minutes)
    store.record_session(
        started_at=latest.start,
        ended_at=latest.end,
        commits=latest.commit_count,
        trust_pass_rate=trust,
        rework_ratio=rework,
        spirals=latest.spiral_count,
        vibe_score=vibe_score.value,
    )
    return comparison


def list_sessions(
    path: str = ".",
    since: Optional[str] = None,
    until: Optional[str] = None,
    gap_minutes: Optional[float] = None,
    config_file: Optional[Path] = None,
    **overrides,
) -> SessionDetectionResult:
    """Split the commit range into sessions.

    ``gap_minutes`` defaults to ``session_detection_gap_minutes`` from the
    configuration.
    """
    repo = _resolve_repo(path)
    config = load_config(config_file=config_file, **overrides)
    gap = config.session_detection_gap_minutes if gap_minutes is None else gap_minutes
    if gap <= 0:
        raise InvalidConfigError("gap_minutes", gap, "must be positive")

    extraction = _extract(repo, config, since, until)
    return detect_sessions(extraction.commits, gap)


def load_session_history(
    path: str = ".", config_file: Optional[Path] = None, **overrides
) -> SessionHistory:
    """Stored session records and the personal baseline, if any."""
    repo = _resolve_repo(path)
    config = load_config(config_file=config_file, **overrides)
    return SessionHistoryStore(str(repo), config.data_dir).load()


def _reasoning(responses: QuestionResponses, features: list[float], source: Source) -> list[str]:
    reasons = []
    if source == "ml":
        reasons.append("Based on git history + your answers")
        if features[5] < 0.7:
            reasons.append("File churn detected - code needed rework")
        if features[6] < 0.7:
            reasons.append("Time spirals detected - rapid fix commits")
    else:
        reasons.append("Not enough git history - using question answers only")

    if responses.reversibility <= -1:
        reasons.append("Low reversibility requires careful review")
    if responses.blast_radius <= -1:
        reasons.append("Wide blast radius increases risk")
    if responses.verification_cost <= -1:
        reasons.append("High verification cost needs extra attention")
    if responses.domain_complexity <= -1:
        reasons.append("Domain complexity may cause AI errors")
    if responses.ai_track_record <= -1:
        reasons.append("AI track record suggests caution")
    return reasons


def recommend_level(
    responses: Optional[QuestionResponses] = None,
    path: str = ".",
    since: Optional[str] = None,
    until: Optional[str] = None,
    config_file: Optional[Path] = None,
    **overrides,
) -> LevelRecommendation:
    """Recommend a trust level for upcoming work.

    The questionnaire answers and the repository's recent semantic-free
    metrics feed the calibrated ordinal model. With too few commits the
    metric features fall back to neutral values.
    """
    responses = responses or QuestionResponses()
    repo = _resolve_repo(path)
    config = load_config(config_file=config_file, **overrides)

    extraction = _extract(repo, config, since, until)
    source: Source
    if extraction.total_commits >= config.min_commits_for_metrics:
        metrics, _ = _score(repo, config, extraction)
        features = build_features(responses, metrics)
        source = "ml"
    else:
        features = build_features(responses)
        source = "fallback"

    state = CalibrationStore(str(repo), config.thresholds, config.data_dir).load()
    prediction = predict_with_confidence(features, state.model)

    return LevelRecommendation(
        responses=responses,
        features=features,
        prediction=prediction,
        base_level=calculate_base_level(responses),
        phase=state.phase(config.thresholds.retrain_ece_threshold),
        sample_count=state.sample_count,
        ece=state.ece,
        source=source,
        reasoning=_reasoning(responses, features, source),
    )


def record_calibration(
    declared_level: int,
    path: str = ".",
    responses: Optional[QuestionResponses] = None,
    since: Optional[str] = None,
    until: Optional[str] = None,
    config_file: Optional[Path] = None,
    **overrides,
) -> CalibrationState:
    """Record how work at ``declared_level`` actually went.

    The observed VibeScore of the commit range becomes a calibration sample;
    the store retrains when its policy triggers.

    Raises:
        InvalidLevelError: If declared_level is outside 0..5
        InsufficientDataError: If the range has too few commits to score
    """
    expected_range(declared_level)
    responses = responses or QuestionResponses()
    repo = _resolve_repo(path)
    config = load_config(config_file=config_file, **overrides)

    extraction = _extract(repo, config, since, until)
    if extraction.total_commits < config.min_commits_for_metrics:
        raise InsufficientDataError(
            f"{extraction.total_commits} commits in range", config.min_commits_for_metrics
        )

    metrics, vibe_score = _score(repo, config, extraction)
    store = CalibrationStore(str(repo), config.thresholds, config.data_dir)
    state = store.record(build_features(responses, metrics), declared_level, vibe_score.value)
    logger.info(
        "Recorded calibration sample %d (level %d, VibeScore %.2f)",
        state.sample_count,
        declared_level,
        vibe_score.value,
    )
    return state


def retrain_calibration(
    path: str = ".",
    strict: bool = False,
    config_file: Optional[Path] = None,
    **overrides,
) -> CalibrationState:
    """Force a retrain of the calibration model.

    Raises:
        InsufficientDataError: If ``strict`` and there are too few samples
    """
    repo = _resolve_repo(path)
    config = load_config(config_file=config_file, **overrides)
    store = CalibrationStore(str(repo), config.thresholds, config.data_dir)

    minimum = config.thresholds.min_samples_for_retrain
    state = store.force_retrain()
    if strict and state.sample_count < minimum:
        raise InsufficientDataError(f"{state.sample_count} calibration samples", minimum)
    return state
