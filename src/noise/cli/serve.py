#!/usr/bin/env python3
"""Run the NOISE web server under uvicorn."""

import click
import uvicorn

from noise.config import ConfigManager


@click.command()
@click.option("--host", default=None, help="Bind address (defaults to server.host)")
@click.option("--port", type=int, default=None, help="Bind port (defaults to server.port)")
@click.option("--reload", is_flag=True, help="Restart on code changes (development only)")
def cli(host: str | None, port: int | None, reload: bool) -> None:
    """Serve the board API and WebSocket feed."""
    config = ConfigManager().load()

    host = host or config.server.host
    port = port or config.server.port

    click.echo(f"Starting NOISE server on http://{host}:{port} ({config.environment})")
    uvicorn.run(
        "noise.web.main:app",
        host=host,
        port=port,
        reload=reload,
        log_config=None,
    )


if __name__ == "__main__":
    cli()
