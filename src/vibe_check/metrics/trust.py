"""Trust pass rate: commits that did not need an immediate follow-up fix."""

from collections.abc import Sequence

from ..math import round_int
from ..temporal.models import Commit, sort_commits, whole_minutes_between
from .models import MetricResult, Rating, band_above

FOLLOWUP_WINDOW_MINUTES = 30
# Shorter words such as "fix" or "the" never count as shared
_MIN_SHARED_WORD_LENGTH = 4

_DESCRIPTIONS = {
    Rating.ELITE: "Code sticks on first try, high AI trust",
    Rating.HIGH: "Occasional fixes needed, mostly autonomous",
    Rating.MEDIUM: "Regular intervention required",
    Rating.LOW: "Heavy oversight needed, run tracer tests before implementation",
}


def same_component(a: Commit, b: Commit) -> bool:
    """Scopes decide when both commits have one; otherwise the leading words do."""
    if a.scope and b.scope:
        return a.scope.lower() == b.scope.lower()

    a_words = a.message.split()[:3]
    b_words = set(b.message.split()[:3])
    return any(len(word) >= _MIN_SHARED_WORD_LENGTH and word in b_words for word in a_words)


def needs_followup(commit: Commit, next_commit: Commit, window_minutes: float) -> bool:
    return (
        next_commit.is_fix
        and same_component(commit, next_commit)
        and whole_minutes_between(commit.date, next_commit.date) < window_minutes
    )


def calculate_trust_pass_rate(
    commits: Sequence[Commit], followup_window_minutes: float = FOLLOWUP_WINDOW_MINUTES
) -> MetricResult:
    if not commits:
        return MetricResult(value=100, unit="%", rating=Rating.ELITE, description="No commits found")

    ordered = sort_commits(commits)
    untrusted = sum(
        1
        for commit, next_commit in zip(ordered, ordered[1:])
        if needs_followup(commit, next_commit, followup_window_minutes)
    )
    rate = (len(ordered) - untrusted) / len(ordered) * 100
    rating = band_above(rate, 95, 80, 60)
    return MetricResult(
        value=round_int(rate), unit="%", rating=rating, description=_DESCRIPTIONS[rating]
    )
