"""Code stability: how much of the added code survives."""

from collections.abc import Mapping, Sequence
from typing import Optional

from ..math import round_int
from ..temporal.models import Commit, LineStats
from .models import CodeStabilityResult, Rating, band_at_least

# Deletions are only partly penalised; some of them are refactoring
DELETION_PENALTY = 0.5
_UNSTABLE_WORDS = ("fix", "revert", "undo")


def calculate_code_stability(
    commits: Sequence[Commit], line_stats: Optional[Mapping[str, LineStats]] = None
) -> CodeStabilityResult:
    """Stability from line counts, or estimated from commit wording without them."""
    if not commits:
        return CodeStabilityResult(
            value=100, unit="%", rating=Rating.ELITE, description="No commits found"
        )

    stats = [line_stats[c.hash] for c in commits if line_stats and c.hash in line_stats]
    if not stats:
        return _estimate_from_messages(commits)

    added = sum(s.additions for s in stats)
    deleted = sum(s.deletions for s in stats)
    churn = min(deleted / added, 1.0) if added > 0 else 0.0
    score = 1 - churn * DELETION_PENALTY
    rating = band_at_least(score, 0.85, 0.70, 0.50)

    description = f"{rating.value.capitalize()}: {round_int(score * 100)}% stability (+{added}/-{deleted})"
    if rating is Rating.LOW:
        description += " - high churn"

    return CodeStabilityResult(
        value=round_int(score * 100),
        unit="%",
        rating=rating,
        description=description,
        lines_added=added,
        lines_surviving=round_int(added * score),
    )


def _estimate_from_messages(commits: Sequence[Commit]) -> CodeStabilityResult:
    unstable = sum(
        1 for c in commits if any(word in c.message.lower() for word in _UNSTABLE_WORDS)
    )
    fraction = unstable / len(commits)
    score = 1 - fraction
    return CodeStabilityResult(
        value=round_int(score * 100),
        unit="%",
        rating=band_at_least(score, 0.85, 0.70, 0.50),
        description=f"Estimated: {round_int(fraction * 100)}% fix/revert commits",
    )
