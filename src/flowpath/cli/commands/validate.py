"""Validate command: report graph issues for every flow in a config."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from flowpath.config.loader import ConfigLoader
from flowpath.core.errors import ConfigError
from flowpath.validation.graph import GraphIssue, has_errors, validate_graph

SEVERITY_STYLES = {"error": "bold red", "warning": "yellow"}


def _issue_table(flow_id: str, issues: list[GraphIssue]) -> Table:
    table = Table(title=f"Flow '{flow_id}'")
    table.add_column("Severity")
    table.add_column("Code")
    table.add_column("Element")
    table.add_column("Message")
    for issue in issues:
        style = SEVERITY_STYLES.get(issue.severity, "")
        table.add_row(
            f"[{style}]{issue.severity}[/]", issue.code, issue.element_id or "-", issue.message
        )
    return table


def validate(
    path: Path = typer.Argument(
        ..., help="Config file, config directory or flow file", exists=True
    ),
    flow: str | None = typer.Option(None, "--flow", "-f", help="Only check this flow id"),
    strict: bool = typer.Option(False, "--strict", help="Fail on warnings too"),
) -> None:
    """Check flow graphs and exit non-zero when problems are found."""
    console = Console()

    try:
        flows = ConfigLoader.load_flows(path)
    except (ConfigError, OSError) as e:
        console.print(f"[bold red]Cannot load {path}:[/] {e}")
        raise typer.Exit(2) from e

    if flow is not None:
        if flow not in flows:
            console.print(f"[bold red]Flow '{flow}' not found in {path}[/]")
            raise typer.Exit(2)
        flows = {flow: flows[flow]}

    if not flows:
        console.print(f"[yellow]No flows found in {path}[/]")
        return

    failed = False
    for flow_id, graph in flows.items():
        issues = validate_graph(graph)
        if not issues:
            console.print(f"[green]Flow '{flow_id}': OK[/]")
            continue
        console.print(_issue_table(flow_id, issues))
        if has_errors(issues) or strict:
            failed = True

    if failed:
        raise typer.Exit(1)
