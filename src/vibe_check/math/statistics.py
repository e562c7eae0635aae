"""Descriptive statistics and rounding shared by metrics and stores."""

import math
import statistics as stdlib_stats

import numpy as np


class Statistics:
    """Statistical helpers."""

    @staticmethod
    def mean(values: list[float]) -> float:
        """Compute arithmetic mean (0.0 for no values)."""
        if not values:
            return 0.0
        return stdlib_stats.mean(values)

    @staticmethod
    def median(values: list[float]) -> float:
        """Compute median; even-length inputs average the two middle values."""
        if not values:
            return 0.0
        return stdlib_stats.median(values)

    @staticmethod
    def pstdev(values: list[float]) -> float:
        """Compute population standard deviation."""
        if len(values) < 2:
            return 0.0
        return float(np.std(np.asarray(values, dtype=float)))

    @staticmethod
    def z_score(x: float, mean: float, std: float) -> float:
        """Compute absolute z-score: |x - mu| / sigma (0 when sigma is 0)."""
        if std <= 0:
            return 0.0
        return abs(x - mean) / std

    @staticmethod
    def sigmoid(x: float) -> float:
        """Logistic function, stable for large |x|."""
        if x >= 0:
            return 1.0 / (1.0 + math.exp(-x))
        z = math.exp(x)
        return z / (1.0 + z)


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with halves going up (2.5 -> 3, -2.5 -> -2)."""
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    """Round half up to an integer."""
    return int(math.floor(value + 0.5))
