"""Level CLI command -- recommend a trust level for upcoming work."""

import json
from typing import Optional

import typer
from rich.table import Table

from ..api import LevelRecommendation, recommend_level
from ..exceptions import VibeCheckError
from ..recommend import TRUST_LEVELS, VIBE_QUESTIONS
from . import app
from ._common import build_responses, console, context_config, context_path, level_style


@app.command()
def level(
    ctx: typer.Context,
    reversibility: int = typer.Option(
        0, "--reversibility", min=-2, max=1, help="1 easy to undo .. -2 cannot be undone"
    ),
    blast_radius: int = typer.Option(
        0, "--blast-radius", min=-2, max=1, help="1 this file only .. -2 production/users"
    ),
    verification_cost: int = typer.Option(
        0, "--verification-cost", min=-2, max=1, help="1 instant .. -2 hard to verify"
    ),
    domain_complexity: int = typer.Option(
        0, "--domain-complexity", min=-2, max=1, help="1 generic .. -2 novel/research"
    ),
    ai_track_record: int = typer.Option(
        0, "--ai-track-record", min=-2, max=1, help="1 excellent .. -2 poor/unknown"
    ),
    since: Optional[str] = typer.Option(
        "1 week ago", "--since", help="Commit range used for the metric features"
    ),
    until: Optional[str] = typer.Option(None, "--until", help="End of the commit range"),
    json_output: bool = typer.Option(False, "--json", help="Output in machine-readable JSON format"),
):
    """
    Recommend how much to trust the AI on the next task.

    Combines your answers to five risk questions with recent git metrics.

    [bold cyan]Examples:[/bold cyan]

      vibe-check level --blast-radius -2 --verification-cost -1

      vibe-check level --json
    """
    try:
        responses = build_responses(
            reversibility, blast_radius, verification_cost, domain_complexity, ai_track_record
        )
        rec = recommend_level(
            responses,
            str(context_path(ctx)),
            since=since,
            until=until,
            config_file=context_config(ctx),
        )
    except VibeCheckError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if json_output:
        print(json.dumps(rec.to_dict(), indent=2))
    else:
        _output_rich(rec)


def _output_rich(rec: LevelRecommendation) -> None:
    prediction = rec.prediction
    info = TRUST_LEVELS[prediction.level]
    style = level_style(prediction.level)

    console.print()
    console.print(f"[{style}]Level {prediction.level}: {info.name}[/{style}]")
    console.print(f"  AI trust: {info.trust}   Verify: {info.verify}")
    console.print(
        f"  Confidence: {prediction.confidence:.0%} "
        f"[dim](CI {prediction.ci[0]:g}..{prediction.ci[1]:g})[/dim]"
    )
    console.print()

    table = Table(title="Your answers", pad_edge=True)
    table.add_column("Question")
    table.add_column("Answer")
    answers = rec.responses.to_dict()
    for question in VIBE_QUESTIONS:
        value = answers[question.id]
        label = next((o.label for o in question.options if o.value == value), str(value))
        table.add_row(question.text, label)
    console.print(table)

    for reason in rec.reasoning:
        console.print(f"  - {reason}")
    console.print()
    console.print(
        f"  [dim]model: {rec.phase.value}, {rec.sample_count} samples, ECE {rec.ece:g}, "
        f"source {rec.source}, questionnaire-only level {rec.base_level}[/dim]"
    )
    console.print()
