"""Main CLI entry point for flowpath"""

import typer

from flowpath.__version__ import __version__
from flowpath.cli.commands import server as server_module
from flowpath.cli.commands.validate import validate
from flowpath.cli.commands.walk import walk

app = typer.Typer(
    name="flowpath",
    help="flowpath - branching onboarding flows",
    add_completion=False,
)

# Register subcommands
app.add_typer(server_module.app, name="server", help="Start the flowpath API server")
app.command(name="validate", help="Check flow graphs for broken routing")(validate)
app.command(name="walk", help="Walk a flow interactively in the terminal")(walk)


def version_callback(value: bool) -> None:
    """Print version and exit"""
    if value:
        typer.echo(f"flowpath version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """flowpath - branching onboarding flows"""
    pass


def cli() -> None:
    """Entry point for CLI"""
    app()


if __name__ == "__main__":
    cli()
