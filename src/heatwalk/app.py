"""
Command-line interface for heatwalk using Typer.
"""

from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from heatwalk import __version__
from heatwalk.api import recommend, scan
from heatwalk.core_types import CandidateEvaluation, OptimizationDirection
from heatwalk.exceptions import OptimalTimeFinderError
from heatwalk.utils.logging import LogLevel, ProgressTracker, log_error, setup_logging

app = typer.Typer(
    help="heatwalk: find the departure time with the least heat stress for a walk",
    add_completion=False,
)
console = Console()


def _setup(verbose: bool, debug: bool, quiet: bool) -> None:
    if debug:
        setup_logging(LogLevel.DEBUG)
    elif verbose:
        setup_logging(LogLevel.VERBOSE)
    elif quiet:
        setup_logging(LogLevel.QUIET)
    else:
        setup_logging(LogLevel.NORMAL)


def _parse_now(now: Optional[str]) -> Optional[datetime]:
    if now is None:
        return None
    try:
        return datetime.fromisoformat(now)
    except ValueError as exc:
        raise typer.BadParameter(f"'{now}' is not an ISO datetime") from exc


def _format_minutes(value: Optional[timedelta]) -> str:
    if value is None:
        return "-"
    return f"{value.total_seconds() / 60:.1f} min"


@app.command()
def find(
    config: Path = typer.Argument(..., help="Path to the YAML configuration file"),
    routes: Optional[Path] = typer.Option(
        None, "--routes", "-r", help="Route table CSV (overrides the config)"
    ),
    now: Optional[str] = typer.Option(
        None, "--now", help="Current time as ISO datetime (default: configured earliest)"
    ),
    step: Optional[float] = typer.Option(
        None, "--step", "-s", help="Sampling step in minutes"
    ),
    maximize: bool = typer.Option(
        False, "--maximize", help="Maximize the objective instead of minimizing it"
    ),
    jobs: Optional[int] = typer.Option(
        None, "--jobs", "-j", help="Concurrent evaluations (-1 for all cores)"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Stop searching after this many seconds"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show errors"),
) -> None:
    """Recommend the best departure time for the configured walk."""
    _setup(verbose, debug, quiet)

    if not config.exists():
        console.print(f"[red]Error: Config file not found: {config}[/red]")
        raise typer.Exit(1)

    progress = ProgressTracker(["Search departure windows"])
    try:
        recommendation = recommend(
            config,
            now=_parse_now(now),
            routes=routes,
            step=timedelta(minutes=step) if step is not None else None,
            direction=OptimizationDirection.MAXIMIZE if maximize else None,
            n_jobs=jobs,
            timeout=timeout,
        )
    except (OptimalTimeFinderError, FileNotFoundError, ValueError) as e:
        progress.close()
        log_error(str(e))
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    progress.advance("Search finished")
    progress.close()

    if recommendation is None:
        console.print("[yellow]No feasible departure time found[/yellow]")
        return

    table = Table(title="Recommended Departure", show_header=True)
    table.add_column("Departure", style="cyan")
    table.add_column("Arrival")
    table.add_column("Value", justify="right", style="green")
    table.add_column("Walking Time", justify="right")
    table.add_column("Distance", justify="right")
    table.add_column("Window", style="dim")
    table.add_row(
        recommendation.time.isoformat(sep=" ", timespec="minutes"),
        recommendation.arrival.isoformat(sep=" ", timespec="minutes")
        if recommendation.arrival
        else "-",
        f"{recommendation.value:.3f}",
        _format_minutes(recommendation.walking_time),
        f"{recommendation.distance:.0f} m" if recommendation.distance is not None else "-",
        f"{recommendation.window.lower:%H:%M} - {recommendation.window.upper:%H:%M}",
    )
    console.print(table)


@app.command("scan")
def scan_command(
    config: Path = typer.Argument(..., help="Path to the YAML configuration file"),
    routes: Optional[Path] = typer.Option(
        None, "--routes", "-r", help="Route table CSV (overrides the config)"
    ),
    now: Optional[str] = typer.Option(None, "--now", help="Current time as ISO datetime"),
    step: Optional[float] = typer.Option(None, "--step", "-s", help="Sampling step in minutes"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Also write the evaluations to this CSV file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """Show the objective value of every sampled departure time."""
    _setup(verbose, debug, quiet=False)

    if not config.exists():
        console.print(f"[red]Error: Config file not found: {config}[/red]")
        raise typer.Exit(1)

    try:
        results = scan(
            config,
            now=_parse_now(now),
            routes=routes,
            step=timedelta(minutes=step) if step is not None else None,
        )
    except (OptimalTimeFinderError, FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not results:
        console.print("[yellow]No departure window left[/yellow]")
        return

    all_evaluations = []
    for window, evaluations in results:
        all_evaluations.extend(evaluations)
        table = Table(title=f"Candidates {window.lower} - {window.upper}", show_header=True)
        table.add_column("Departure", style="cyan")
        table.add_column("Value", justify="right")
        table.add_column("Walking Time", justify="right")
        for evaluation in evaluations:
            table.add_row(
                f"{evaluation.time:%Y-%m-%d %H:%M}",
                f"{evaluation.value:.3f}" if evaluation.feasible else "[red]infeasible[/red]",
                _format_minutes(evaluation.walking_time),
            )
        console.print(table)

    if output is not None:
        CandidateEvaluation.to_dataframe(all_evaluations).to_csv(output, index=False)
        console.print(f"[dim]Evaluations written to {output}[/dim]")


@app.command()
def version() -> None:
    """Show the heatwalk version."""
    console.print(f"heatwalk version {__version__}")


def main():
    app()


if __name__ == "__main__":
    main()
