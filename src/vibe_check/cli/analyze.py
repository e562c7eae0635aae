"""Main callback and the analyze command."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..api import AnalysisReport, analyze as run_analysis
from ..exceptions import VibeCheckError
from ..logging_config import setup_logging
from . import app
from ._common import console, context_config, context_path, rating_text


@app.callback(invoke_without_command=True, no_args_is_help=False)
def main(
    ctx: typer.Context,
    path: Optional[Path] = typer.Option(
        None,
        "-C",
        "--path",
        help="Repository root to analyze (default: current directory)",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
):
    """
    Analyze how AI-assisted coding sessions actually went, from git history.

    [bold cyan]Examples:[/bold cyan]

      vibe-check analyze --since "1 week ago"

      vibe-check level --blast-radius -1

      vibe-check -C /path/to/repo calibrate 3
    """
    ctx.ensure_object(dict)
    ctx.obj["path"] = path if path else Path.cwd()
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose

    if version:
        from .. import __version__

        console.print(f"[bold cyan]vibe-check[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    setup_logging(verbose=verbose, quiet=quiet)

    if ctx.invoked_subcommand is None:
        analyze(ctx, since=None, until=None, json_output=False, record=False)


@app.command()
def analyze(
    ctx: typer.Context,
    since: Optional[str] = typer.Option(
        None, "--since", help="Start of the commit range (git date, e.g. '1 week ago')"
    ),
    until: Optional[str] = typer.Option(None, "--until", help="End of the commit range"),
    json_output: bool = typer.Option(False, "--json", help="Output in machine-readable JSON format"),
    record: bool = typer.Option(
        False,
        "--record",
        help="Save the latest session to .vibe-check/sessions.json and compare with your baseline",
    ),
):
    """
    Score a commit range: semantic metrics, fix chains, sessions and VibeScore.
    """
    try:
        report = run_analysis(
            str(context_path(ctx)),
            since=since,
            until=until,
            config_file=context_config(ctx),
            record_session=record,
        )
    except VibeCheckError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if json_output:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        _output_rich(report)


def _output_rich(report: AnalysisReport) -> None:
    result = report.result
    console.print()

    if result.commits.total == 0:
        console.print("[yellow]No commits found in range.[/yellow]")
        console.print()
        return

    console.print(
        f"[bold cyan]VIBE-CHECK[/bold cyan] - {result.commits.total} commits, "
        f"{result.active_hours}h active "
        f"({result.period_from:%Y-%m-%d %H:%M} to {result.period_to:%Y-%m-%d %H:%M})"
    )
    console.print(
        f"  [dim]feat {result.commits.feat}  fix {result.commits.fix}  "
        f"docs {result.commits.docs}  other {result.commits.other}[/dim]"
    )
    console.print()

    table = Table(title="Semantic Metrics", pad_edge=True)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_column("Rating")
    table.add_column("", style="dim")
    m = result.metrics
    for label, metric in (
        ("Iteration velocity", m.iteration_velocity),
        ("Rework ratio", m.rework_ratio),
        ("Trust pass rate", m.trust_pass_rate),
        ("Debug spiral duration", m.debug_spiral_duration),
        ("Flow efficiency", m.flow_efficiency),
    ):
        table.add_row(label, f"{metric.value:g} {metric.unit}", rating_text(metric.rating), metric.description)
    console.print(table)

    table = Table(title=f"VibeScore {report.vibe_score.value:.0%}", pad_edge=True)
    table.add_column("Signal", style="bold")
    table.add_column("Score", justify="right")
    table.add_column("Weight", justify="right", style="dim")
    table.add_column("Rating")
    table.add_column("", style="dim")
    weights = report.vibe_score.weights.as_dict()
    s = report.metrics
    for key, label, metric in (
        ("file_churn", "File churn", s.file_churn),
        ("time_spiral", "Time spiral", s.time_spiral),
        ("velocity_anomaly", "Velocity anomaly", s.velocity_anomaly),
        ("code_stability", "Code stability", s.code_stability),
    ):
        table.add_row(
            label, f"{metric.value:g}%", f"{weights[key]:.2f}", rating_text(metric.rating), metric.description
        )
    console.print(table)

    if result.fix_chains:
        table = Table(title="Fix Chains", pad_edge=True)
        table.add_column("Component", style="bold")
        table.add_column("Commits", justify="right")
        table.add_column("Minutes", justify="right")
        table.add_column("Pattern", style="cyan")
        for chain in result.fix_chains:
            table.add_row(chain.component, str(chain.commits), str(chain.duration), chain.pattern or "-")
        console.print(table)
        console.print(
            f"  [dim]{result.patterns.tracer_available}% of spiral commits match a known pattern[/dim]"
        )

    console.print()
    console.print(f"  [bold]Overall:[/bold] {result.overall.value}")

    comparison = report.comparison
    if comparison is not None:
        console.print()
        if comparison.has_baseline:
            style = {"above": "green", "below": "yellow"}.get(comparison.verdict or "", "dim")
            console.print("[bold cyan]VS YOUR BASELINE[/bold cyan]")
            console.print(
                f"  Trust:  {comparison.trust_pass_rate:g}% "
                f"({comparison.trust_delta:+g} vs avg {comparison.baseline.trust_pass_rate}%)"
            )
            console.print(
                f"  Rework: {comparison.rework_ratio:g}% "
                f"({comparison.rework_delta:+g} vs avg {comparison.baseline.rework_ratio}%)"
            )
            console.print(f"  [{style}]{comparison.message}[/{style}]")
        else:
            console.print("  [dim]Building your baseline...[/dim]")
    console.print()
