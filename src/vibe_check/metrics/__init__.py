"""Composite metric engine: semantic and semantic-free commit metrics."""

from .analyzer import (
    CommitCounts,
    SemanticMetrics,
    VibeCheckResult,
    analyze_commits,
    calculate_semantic_free_metrics,
    count_commit_types,
    overall_rating,
)
from .code_stability import calculate_code_stability
from .file_churn import calculate_file_churn
from .flow import calculate_flow_efficiency
from .models import (
    CodeStabilityResult,
    FileChurnResult,
    MetricResult,
    OverallRating,
    Rating,
    ScoreInputs,
    TimeSpiralResult,
    VelocityAnomalyResult,
)
from .rework import calculate_rework_ratio
from .spirals import calculate_debug_spiral_duration
from .time_spiral import calculate_time_spiral
from .trust import calculate_trust_pass_rate
from .velocity import calculate_iteration_velocity
from .velocity_anomaly import DEFAULT_BASELINE, calculate_velocity_anomaly

__all__ = [
    "Rating",
    "OverallRating",
    "MetricResult",
    "FileChurnResult",
    "TimeSpiralResult",
    "VelocityAnomalyResult",
    "CodeStabilityResult",
    "ScoreInputs",
    "CommitCounts",
    "SemanticMetrics",
    "VibeCheckResult",
    "DEFAULT_BASELINE",
    "analyze_commits",
    "calculate_semantic_free_metrics",
    "count_commit_types",
    "overall_rating",
    "calculate_iteration_velocity",
    "calculate_rework_ratio",
    "calculate_trust_pass_rate",
    "calculate_debug_spiral_duration",
    "calculate_flow_efficiency",
    "calculate_file_churn",
    "calculate_time_spiral",
    "calculate_velocity_anomaly",
    "calculate_code_stability",
]
