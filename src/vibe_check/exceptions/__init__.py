"""Exception hierarchy for vibe-check."""

from .analysis import (
    AnalysisError,
    InsufficientDataError,
    InvalidFeatureError,
    InvalidLevelError,
)
from .base import VibeCheckError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)

__all__ = [
    "VibeCheckError",
    "AnalysisError",
    "InvalidFeatureError",
    "InvalidLevelError",
    "InsufficientDataError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
]
