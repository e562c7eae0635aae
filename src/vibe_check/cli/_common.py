"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..metrics import Rating
from ..recommend import QuestionResponses

console = Console()

RATING_STYLES = {
    Rating.ELITE: "bold green",
    Rating.HIGH: "green",
    Rating.MEDIUM: "yellow",
    Rating.LOW: "red",
}


def rating_text(rating: Rating) -> str:
    style = RATING_STYLES[rating]
    return f"[{style}]{rating.value.upper()}[/{style}]"


def level_style(level: int) -> str:
    if level >= 4:
        return "bold green"
    if level >= 2:
        return "bold yellow"
    return "bold red"


def context_path(ctx: typer.Context) -> Path:
    """Repository root chosen on the top-level command."""
    obj = ctx.obj or {}
    return obj.get("path", Path.cwd())


def context_config(ctx: typer.Context) -> Optional[Path]:
    obj = ctx.obj or {}
    return obj.get("config")


def build_responses(
    reversibility: int,
    blast_radius: int,
    verification_cost: int,
    domain_complexity: int,
    ai_track_record: int,
) -> QuestionResponses:
    return QuestionResponses(
        reversibility=reversibility,
        blast_radius=blast_radius,
        verification_cost=verification_cost,
        domain_complexity=domain_complexity,
        ai_track_record=ai_track_record,
    )
