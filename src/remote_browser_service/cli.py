"""Command line interface for the remote browser service."""

from __future__ import annotations

import asyncio
import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path
from typing import Annotated, Any, Optional

import httpx
import typer
import uvicorn
from rich.console import Console

from .client import BrowserServiceClient
from .config import load_config
from .factory import build_app

app = typer.Typer(help="Remote Browser Service entry point")


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure logging before executing any command."""

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@app.command()
def version() -> None:
    """Print the package version."""

    try:
        typer.echo(get_version("remote-browser-service"))
    except PackageNotFoundError:  # pragma: no cover - when running from source tree
        typer.echo("0.0.0")


@app.command()
def serve(
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to YAML configuration."),
    ] = None,
    env_file: Annotated[
        Optional[Path],
        typer.Option(
            "--env-file",
            help="Path to an .env file with default configuration values.",
        ),
    ] = None,
    host: Annotated[
        Optional[str],
        typer.Option("--host", help="Binding address for the HTTP server."),
    ] = None,
    port: Annotated[
        Optional[int],
        typer.Option("--port", "-p", envvar="PORT", help="Listening port."),
    ] = None,
    endpoint: Annotated[
        Optional[str],
        typer.Option("--endpoint", help="Remote browser CDP endpoint."),
    ] = None,
) -> None:
    """Run the HTTP service."""

    overrides: dict[str, Any] = {}
    if host is not None or port is not None:
        overrides.setdefault("server", {})
        if host is not None:
            overrides["server"]["host"] = host
        if port is not None:
            overrides["server"]["port"] = port
    if endpoint is not None:
        overrides["browser"] = {"endpoint": endpoint}

    config = load_config(config_path, env_file=env_file, **overrides)
    typer.echo(
        f"Remote browser service running on {config.server.host}:{config.server.port}"
    )
    uvicorn.run(
        build_app(config),
        host=config.server.host,
        port=config.server.port,
        log_config=None,
    )


@app.command()
def health(
    url: Annotated[
        str,
        typer.Option("--url", help="Base URL of a running service."),
    ] = "http://127.0.0.1:3000",
) -> None:
    """Query a running service and print its status."""

    console = Console()
    client = BrowserServiceClient(url, timeout=10.0)
    try:
        status = asyncio.run(client.get_health())
    except httpx.HTTPError as exc:
        console.print(f"[ERROR] {exc}", style="red")
        raise typer.Exit(code=1) from exc
    console.print(f"[OK] {status.status}", style="green")
    console.print({"activeSessions": status.active_sessions}, style="dim")


if __name__ == "__main__":
    app()
