"""
netdiag CLI - explain the most likely performance bottleneck.

Usage:
    netdiag analyze signals.json
    netdiag analyze --rules my_rules.yaml --format json signals.yaml
    netdiag rules
    netdiag --help
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from netdiag import __version__
from netdiag.config import get_config
from netdiag.engine import DiagnosticEngine, RuleSet, display_name
from netdiag.exceptions import NetDiagError
from netdiag.output import OutputFormat, render
from netdiag.rules import load_ruleset
from netdiag.signals import load_signals

app = typer.Typer(
    name="netdiag",
    help="Rule-based network and performance bottleneck diagnosis",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)

_LEVEL_STYLES = {"High": "green", "Medium": "yellow", "Low": "red"}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"netdiag version {__version__}")
        raise typer.Exit()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log rule evaluation details."),
    ] = False,
    log_level: Annotated[
        Optional[str],
        typer.Option(
            "--log-level",
            help="Log level (overrides NETDIAG_LOG_LEVEL).",
        ),
    ] = None,
) -> None:
    """netdiag - explain the most likely bottleneck from observed signals."""
    try:
        config = get_config()
    except NetDiagError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(code=1)

    if verbose:
        level = "DEBUG"
    else:
        level = log_level or config.log_level
    _configure_logging(level)


def _load_rules(rules_file: Path | None) -> RuleSet:
    return load_ruleset(rules_file or get_config().rules_path)


@app.command()
def analyze(
    signals_file: Annotated[
        Path,
        typer.Argument(
            help="Path to a signals file (JSON or YAML)",
            exists=True,
            readable=True,
            resolve_path=True,
        ),
    ],
    rules_file: Annotated[
        Optional[Path],
        typer.Option(
            "--rules",
            "-r",
            help="Rule-set document (defaults to the packaged rules)",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = OutputFormat.TEXT,
) -> None:
    """
    Diagnose the most likely bottleneck for a set of signals.

    Examples:

        $ netdiag analyze signals.json

        $ netdiag analyze --format json --rules rules.yaml signals.yaml
    """
    try:
        ruleset = _load_rules(rules_file)
        signals = load_signals(signals_file)
        engine = DiagnosticEngine(ruleset, config=get_config())
    except NetDiagError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(code=1)

    result = engine.analyze(signals)

    if output_format != OutputFormat.TEXT:
        typer.echo(render(result, output_format))
        return

    style = _LEVEL_STYLES.get(result.confidence_level.value, "white")
    console.print(Panel(
        f"[bold]{display_name(result.primary_cause)}[/bold]\n"
        f"[{style}]{result.confidence_percent}% ({result.confidence_level.value})[/{style}]",
        title="netdiag",
        border_style=style,
    ))
    typer.echo(engine.explain(result))


@app.command()
def rules(
    rules_file: Annotated[
        Optional[Path],
        typer.Option(
            "--rules",
            "-r",
            help="Rule-set document (defaults to the packaged rules)",
        ),
    ] = None,
) -> None:
    """Summarize the hypotheses and rules of a rule set."""
    try:
        ruleset = _load_rules(rules_file)
    except NetDiagError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(code=1)

    table = Table(title="Hypotheses")
    table.add_column("Hypothesis", style="cyan")
    table.add_column("Initial score", justify="right")
    table.add_column("Eliminated by", justify="right")
    table.add_column("Scored by", justify="right")
    table.add_column("Next steps", justify="right")

    for name, score in ruleset.hypotheses.items():
        eliminated_by = sum(1 for r in ruleset.elimination_rules if name in r.eliminate)
        scored_by = sum(1 for r in ruleset.rules if name in r.delta)
        table.add_row(
            f"{display_name(name)} ({name})",
            f"{score:g}",
            str(eliminated_by),
            str(scored_by),
            str(len(ruleset.next_steps.get(name, ()))),
        )

    console.print(table)
    console.print(
        f"[dim]{len(ruleset.elimination_rules)} elimination rule(s), "
        f"{len(ruleset.rules)} scoring rule(s)[/dim]"
    )


if __name__ == "__main__":
    app()
