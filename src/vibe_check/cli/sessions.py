"""Sessions CLI command -- split history into coding sessions."""

import json
from typing import Optional

import typer
from rich.table import Table

from ..api import list_sessions, load_session_history
from ..exceptions import VibeCheckError
from ..temporal import SessionDetectionResult, SessionHistory
from . import app
from ._common import console, context_config, context_path


@app.command()
def sessions(
    ctx: typer.Context,
    gap: Optional[float] = typer.Option(
        None,
        "--gap",
        help="Minutes of inactivity that close a session (default: 90)",
        min=1,
    ),
    since: Optional[str] = typer.Option(None, "--since", help="Start of the commit range"),
    until: Optional[str] = typer.Option(None, "--until", help="End of the commit range"),
    history: bool = typer.Option(
        False,
        "--history",
        help="Show recorded sessions from .vibe-check/sessions.json instead",
    ),
    json_output: bool = typer.Option(False, "--json", help="Output in machine-readable JSON format"),
):
    """
    Detect coding sessions from commit timing.

    [bold cyan]Examples:[/bold cyan]

      vibe-check sessions --since "2 weeks ago"

      vibe-check sessions --gap 60 --json

      vibe-check sessions --history
    """
    path = str(context_path(ctx))
    config_file = context_config(ctx)
    try:
        if history:
            stored = load_session_history(path, config_file=config_file)
        else:
            detected = list_sessions(path, since=since, until=until, gap_minutes=gap, config_file=config_file)
    except VibeCheckError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if history:
        if json_output:
            print(json.dumps(stored.to_dict(), indent=2))
        else:
            _output_history(stored)
    elif json_output:
        payload = {
            "stats": detected.stats.to_dict(),
            "sessions": [s.to_dict() for s in detected.sessions],
        }
        print(json.dumps(payload, indent=2))
    else:
        _output_sessions(detected)


def _output_sessions(result: SessionDetectionResult) -> None:
    console.print()
    if not result.sessions:
        console.print("[yellow]No commits found in range.[/yellow]")
        console.print()
        return

    table = Table(title="Sessions", pad_edge=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Start")
    table.add_column("Minutes", justify="right")
    table.add_column("Commits", justify="right")
    table.add_column("Fixes", justify="right")
    table.add_column("Rework", justify="right")
    table.add_column("Spirals", justify="right")
    for s in result.sessions:
        spirals = f"[red]{s.spiral_count}[/red]" if s.spiral_count else "0"
        table.add_row(
            str(s.session_id),
            f"{s.start:%Y-%m-%d %H:%M}",
            f"{s.duration_minutes:g}",
            str(s.commit_count),
            str(s.fix_count),
            f"{s.rework_ratio:g}%",
            spirals,
        )
    console.print(table)

    stats = result.stats
    console.print(
        f"  [bold]{stats.total_sessions}[/bold] sessions, "
        f"{stats.avg_commits_per_session:g} commits each on average"
    )
    console.print(
        f"  [dim]duration: avg {stats.avg_duration_minutes:g}m, median {stats.median_duration_minutes:g}m, "
        f"longest {stats.longest_session_minutes:g}m[/dim]"
    )
    console.print()


def _output_history(stored: SessionHistory) -> None:
    console.print()
    if not stored.records:
        console.print(
            "[yellow]No sessions recorded yet.[/yellow] "
            "Run [bold]vibe-check analyze --record[/bold] after a session."
        )
        console.print()
        return

    table = Table(title="Recorded Sessions", pad_edge=True)
    table.add_column("Session")
    table.add_column("Minutes", justify="right")
    table.add_column("Commits", justify="right")
    table.add_column("Trust", justify="right")
    table.add_column("Rework", justify="right")
    table.add_column("Spirals", justify="right")
    table.add_column("VibeScore", justify="right")
    for r in stored.records:
        table.add_row(
            r.id,
            f"{r.duration_minutes:g}",
            str(r.commits),
            f"{r.trust_pass_rate:g}%",
            f"{r.rework_ratio:g}%",
            str(r.spirals),
            f"{r.vibe_score:.0%}" if r.vibe_score is not None else "-",
        )
    console.print(table)

    if stored.baseline is not None:
        b = stored.baseline
        console.print(
            f"  [bold]Baseline:[/bold] trust {b.trust_pass_rate}%, rework {b.rework_ratio}%, "
            f"{b.avg_commits} commits, {b.avg_duration}m per session"
        )
    else:
        console.print("  [dim]Building your baseline...[/dim]")
    console.print()
