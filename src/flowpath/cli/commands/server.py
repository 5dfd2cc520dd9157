"""Server command to start API."""

import os
from pathlib import Path

import typer
import uvicorn

from flowpath.config.loader import ConfigLoader
from flowpath.core.errors import ConfigError
from flowpath.observability.logging import setup_logging

app = typer.Typer(help="Start API server")


@app.callback(invoke_without_command=True)
def start_server(
    config: Path = typer.Option(
        ..., "--config", "-c", help="Path to flowpath.yaml or config directory", exists=True
    ),
    host: str = typer.Option("0.0.0.0", "--host", "-h"),
    port: int = typer.Option(8000, "--port", "-p", min=1, max=65535),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload (development only)"),
) -> None:
    """Start the flowpath API server."""

    # 1. Validate Config
    try:
        loaded = ConfigLoader.load(config)
    except (ConfigError, OSError) as e:
        typer.echo(f"Invalid config: {e}", err=True)
        raise typer.Exit(1) from e

    setup_logging(loaded.settings.log_level, loaded.settings.log_file)

    # 2. Set Env Vars for the server process (it loads config from env)
    os.environ["FLOWPATH_CONFIG_PATH"] = str(config.absolute())

    typer.echo(f"Starting flowpath server on http://{host}:{port}")
    typer.echo(f"   Config: {config}")
    typer.echo(f"   Persistence: {loaded.settings.persistence.backend}")
    typer.echo(f"   Docs: http://{host}:{port}/docs")

    try:
        uvicorn.run(
            "flowpath.server.api:app",
            host=host,
            port=port,
            reload=reload,
            log_level=loaded.settings.log_level.lower(),
        )
    except KeyboardInterrupt:
        typer.echo("\nShutting down flowpath server...")
