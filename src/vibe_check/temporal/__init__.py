"""Temporal analysis: git history, sessions, fix chains and session history."""

from .fix_chains import (
    PATTERNS,
    SPIRAL_THRESHOLD,
    FixChain,
    PatternSummary,
    calculate_pattern_summary,
    component_of,
    detect_fix_chains,
    detect_pattern,
)
from .git_extractor import GitExtractor, parse_conventional
from .history import (
    Baseline,
    BaselineComparison,
    SessionHistory,
    SessionHistoryStore,
    SessionRecord,
    calculate_baseline,
    compare_to_baseline,
    velocity_baseline,
)
from .models import Commit, CommitType, ExtractionResult, FileStats, LineStats, VelocityBaseline
from .sessions import (
    Session,
    SessionDetectionResult,
    SessionStats,
    calculate_active_hours,
    detect_sessions,
)

__all__ = [
    "Commit",
    "CommitType",
    "ExtractionResult",
    "FileStats",
    "LineStats",
    "VelocityBaseline",
    "GitExtractor",
    "parse_conventional",
    "Session",
    "SessionStats",
    "SessionDetectionResult",
    "detect_sessions",
    "calculate_active_hours",
    "SPIRAL_THRESHOLD",
    "PATTERNS",
    "FixChain",
    "PatternSummary",
    "component_of",
    "detect_pattern",
    "detect_fix_chains",
    "calculate_pattern_summary",
    "Baseline",
    "BaselineComparison",
    "SessionHistory",
    "SessionHistoryStore",
    "SessionRecord",
    "calculate_baseline",
    "compare_to_baseline",
    "velocity_baseline",
]
