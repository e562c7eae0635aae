"""File churn: files touched repeatedly inside a short window."""

from collections.abc import Mapping, Sequence
from datetime import datetime, timedelta

from ..math import round_int
from ..temporal.models import Commit
from .models import FileChurnResult, band_below

CHURN_WINDOW_MINUTES = 60
CHURN_TOUCH_THRESHOLD = 3


def _is_churned(touches: list[datetime], window: timedelta, threshold: int) -> bool:
    touches = sorted(touches)
    return any(
        touches[i + threshold - 1] - touches[i] < window
        for i in range(len(touches) - threshold + 1)
    )


def calculate_file_churn(
    commits: Sequence[Commit],
    files_per_commit: Mapping[str, list[str]],
    window_minutes: float = CHURN_WINDOW_MINUTES,
    touch_threshold: int = CHURN_TOUCH_THRESHOLD,
) -> FileChurnResult:
    """Score 100 when no file was touched ``touch_threshold`` times within the window."""
    touches: dict[str, list[datetime]] = {}
    for commit in commits:
        for path in files_per_commit.get(commit.hash, []):
            touches.setdefault(path, []).append(commit.date)

    window = timedelta(minutes=window_minutes)
    churned = sum(1 for times in touches.values() if _is_churned(times, window, touch_threshold))
    total = len(touches)
    ratio = churned / total if total else 0.0

    rating = band_below(ratio, 0.10, 0.25, 0.40)
    if ratio < 0.10:
        detail = "(<10%)"
    elif ratio < 0.25:
        detail = "(10-25%)"
    elif ratio < 0.40:
        detail = "(25-40%)"
    else:
        detail = "(>40%) - significant thrashing"

    return FileChurnResult(
        value=round_int((1 - ratio) * 100),
        unit="%",
        rating=rating,
        description=f"{rating.value.capitalize()}: {churned}/{total} files churned {detail}",
        churned_files=churned,
        total_files=total,
    )
