"""Calibration CLI commands -- record outcomes and retrain the model."""

import json
from typing import Optional

import typer

from ..api import record_calibration, retrain_calibration
from ..calibration import CalibrationState
from ..exceptions import VibeCheckError
from . import app
from ._common import build_responses, console, context_config, context_path


@app.command()
def calibrate(
    ctx: typer.Context,
    declared_level: int = typer.Argument(..., min=0, max=5, help="Trust level you worked at (0-5)"),
    reversibility: int = typer.Option(0, "--reversibility", min=-2, max=1),
    blast_radius: int = typer.Option(0, "--blast-radius", min=-2, max=1),
    verification_cost: int = typer.Option(0, "--verification-cost", min=-2, max=1),
    domain_complexity: int = typer.Option(0, "--domain-complexity", min=-2, max=1),
    ai_track_record: int = typer.Option(0, "--ai-track-record", min=-2, max=1),
    since: Optional[str] = typer.Option(
        "1 day ago", "--since", help="Commit range of the work being recorded"
    ),
    until: Optional[str] = typer.Option(None, "--until", help="End of the commit range"),
    json_output: bool = typer.Option(False, "--json", help="Output in machine-readable JSON format"),
):
    """
    Record how work at a declared level actually went.

    The VibeScore of the commit range becomes a calibration sample. Answer
    options should match the ones given to [bold]level[/bold].

    [bold cyan]Examples:[/bold cyan]

      vibe-check calibrate 3 --since "3 hours ago"

      vibe-check calibrate 4 --blast-radius -1 --json
    """
    try:
        responses = build_responses(
            reversibility, blast_radius, verification_cost, domain_complexity, ai_track_record
        )
        state = record_calibration(
            declared_level,
            str(context_path(ctx)),
            responses=responses,
            since=since,
            until=until,
            config_file=context_config(ctx),
        )
    except VibeCheckError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    sample = state.samples[-1]
    if json_output:
        print(json.dumps({"sample": sample.to_dict(), **_summary(state)}, indent=2))
        return

    style = {"correct": "green", "too_high": "red", "too_low": "yellow"}[sample.outcome.value]
    console.print()
    console.print(
        f"Recorded level {sample.declared_level} at VibeScore {sample.vibe_score:.0%}: "
        f"[{style}]{sample.outcome.value}[/{style}]"
    )
    _print_state(state)


@app.command()
def retrain(
    ctx: typer.Context,
    strict: bool = typer.Option(False, "--strict", help="Fail when there are too few samples"),
    json_output: bool = typer.Option(False, "--json", help="Output in machine-readable JSON format"),
):
    """
    Refit the calibration model on every recorded sample now.
    """
    try:
        state = retrain_calibration(str(context_path(ctx)), strict=strict, config_file=context_config(ctx))
    except VibeCheckError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if json_output:
        print(json.dumps(_summary(state), indent=2))
        return

    console.print()
    if not state.trained:
        console.print(f"[yellow]Not retrained:[/yellow] only {state.sample_count} samples recorded.")
    _print_state(state)


def _summary(state: CalibrationState) -> dict:
    return {
        "sample_count": state.sample_count,
        "ece": state.ece,
        "phase": state.phase().value,
        "version": state.version,
    }


def _print_state(state: CalibrationState) -> None:
    console.print(
        f"  [dim]model: {state.phase().value}, {state.sample_count} samples, "
        f"ECE {state.ece:g}, version {state.version}[/dim]"
    )
    console.print()
