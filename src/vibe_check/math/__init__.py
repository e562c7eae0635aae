"""Mathematical utilities for commit analytics."""

from .statistics import Statistics, round_half_up, round_int

__all__ = ["Statistics", "round_half_up", "round_int"]
