"""Analysis-related exceptions: model inputs, trust levels, data volume."""

from typing import Dict, Optional

from .base import VibeCheckError


class AnalysisError(VibeCheckError):
    """Base class for analysis-related errors."""
    pass


class InvalidFeatureError(AnalysisError):
    """Raised when a feature vector does not match the model's dimension."""

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Expected {expected} features, got {actual}",
            details={"expected": str(expected), "actual": str(actual)},
        )
        self.expected = expected
        self.actual = actual


class InvalidLevelError(AnalysisError):
    """Raised when a trust level falls outside the ordinal scale."""

    def __init__(self, level: object, minimum: int = 0, maximum: int = 5):
        super().__init__(
            f"Invalid trust level: {level}",
            details={"allowed": f"{minimum}..{maximum}"},
        )
        self.level = level


class InsufficientDataError(AnalysisError):
    """Raised when there's not enough data for an explicit request."""

    def __init__(self, reason: str, minimum_required: Optional[int] = None):
        details: Dict[str, str] = {"reason": reason}
        if minimum_required is not None:
            details["minimum_required"] = str(minimum_required)

        super().__init__(f"Insufficient data: {reason}", details=details)
        self.reason = reason
        self.minimum_required = minimum_required
