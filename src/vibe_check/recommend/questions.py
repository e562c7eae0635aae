"""Risk questionnaire that supplies the first five model features."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..metrics.models import ScoreInputs

MIN_ANSWER = -2
MAX_ANSWER = 1
# Stand-in for each metric feature when there is too little history
FALLBACK_METRIC_FEATURE = 0.7


@dataclass(frozen=True)
class QuestionOption:
    value: int
    label: str
    description: str


@dataclass(frozen=True)
class Question:
    id: str
    text: str
    options: tuple[QuestionOption, ...]


VIBE_QUESTIONS: tuple[Question, ...] = (
    Question(
        "reversibility",
        "How easy is it to undo this change?",
        (
            QuestionOption(1, "Easy", "One command to revert (git revert, ctrl+z)"),
            QuestionOption(0, "Moderate", "Some effort required"),
            QuestionOption(-1, "Difficult", "Significant work to undo"),
            QuestionOption(-2, "Impossible", "Cannot be undone (data loss, etc.)"),
        ),
    ),
    Question(
        "blast_radius",
        "What breaks if this goes wrong?",
        (
            QuestionOption(1, "This file only", "Isolated change"),
            QuestionOption(0, "This module", "Affects related components"),
            QuestionOption(-1, "Multiple systems", "Cross-cutting impact"),
            QuestionOption(-2, "Production/users", "Customer-facing impact"),
        ),
    ),
    Question(
        "verification_cost",
        "How hard is it to verify correctness?",
        (
            QuestionOption(1, "Instant", "Obvious, compiler catches errors"),
            QuestionOption(0, "Run tests", "Automated tests verify"),
            QuestionOption(-1, "Manual testing", "Need to manually verify"),
            QuestionOption(-2, "Hard to verify", "Difficult to fully validate"),
        ),
    ),
    Question(
        "domain_complexity",
        "How much domain context is needed?",
        (
            QuestionOption(1, "Generic", "Universal patterns, no special knowledge"),
            QuestionOption(0, "Standard", "Common patterns in this domain"),
            QuestionOption(-1, "Domain-specific", "Requires specialized knowledge"),
            QuestionOption(-2, "Novel/research", "No established patterns"),
        ),
    ),
    Question(
        "ai_track_record",
        "How has AI performed on similar tasks?",
        (
            QuestionOption(1, "Excellent", "Consistently good results"),
            QuestionOption(0, "Generally good", "Usually correct"),
            QuestionOption(-1, "Mixed", "Sometimes needs correction"),
            QuestionOption(-2, "Poor/unknown", "Unreliable or untested"),
        ),
    ),
)


@dataclass(frozen=True)
class QuestionResponses:
    """Answers in -2..1; higher means safer."""

    reversibility: int = 0
    blast_radius: int = 0
    verification_cost: int = 0
    domain_complexity: int = 0
    ai_track_record: int = 0

    def __post_init__(self) -> None:
        for question in VIBE_QUESTIONS:
            value = getattr(self, question.id)
            if not MIN_ANSWER <= value <= MAX_ANSWER:
                raise ValueError(f"{question.id} must be between {MIN_ANSWER} and {MAX_ANSWER}, got {value}")

    def as_list(self) -> list[int]:
        return [getattr(self, q.id) for q in VIBE_QUESTIONS]

    def to_dict(self) -> dict:
        return {q.id: getattr(self, q.id) for q in VIBE_QUESTIONS}


def calculate_base_level(responses: QuestionResponses) -> int:
    """Questionnaire-only level: 3 plus the answers, clamped to 0..5."""
    return max(0, min(5, 3 + sum(responses.as_list())))


def build_features(responses: QuestionResponses, metrics: Optional[ScoreInputs] = None) -> list[float]:
    """The 9-dimensional model input: five answers then four metrics scaled to 0..1."""
    answers = [float(v) for v in responses.as_list()]
    if metrics is None:
        return answers + [FALLBACK_METRIC_FEATURE] * 4
    return answers + [value / 100 for value in metrics.values().values()]


@dataclass(frozen=True)
class TrustLevel:
    name: str
    trust: str
    verify: str


TRUST_LEVELS: dict[int, TrustLevel] = {
    5: TrustLevel("Full Automation", "95%", "Final review only"),
    4: TrustLevel("High Trust", "80%", "Spot check"),
    3: TrustLevel("Balanced", "60%", "Review key outputs"),
    2: TrustLevel("AI-Augmented", "40%", "Review every change"),
    1: TrustLevel("Human-Led", "20%", "Review every line"),
    0: TrustLevel("Manual Only", "0%", "No AI assistance"),
}
