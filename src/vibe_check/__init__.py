"""
vibe-check - commit-stream analytics for AI-assisted coding sessions

Reads a repository's git history, splits it into sessions, detects fix
chains and debug spirals, scores the work with a weighted VibeScore and
recommends how far to trust the AI on the next task.
"""

__version__ = "0.1.0"

from .api import analyze, recommend_level

__all__ = [
    "analyze",
    "recommend_level",
]
