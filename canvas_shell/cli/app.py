"""
Canvas Shell CLI.

Typer application wrapping the interactive shell.

Usage:
    canvas-shell                          # Start the interactive shell
    canvas-shell shell                    # Same, explicitly
    canvas-shell run context tree         # Run one shell command and exit
    canvas-shell run context set /work    # Arguments are passed through
    canvas-shell ping                     # Check the server answers /ping
    canvas-shell config                   # Show the effective transport config

Options:
    --config PATH     Transport config file (default ~/.canvas/config/transports.rest.json)
    --verbose, -v     Enable verbose output
    --debug, -d       Enable debug mode (detailed logging)
"""

import asyncio
import shlex
from pathlib import Path
from typing import Optional

import structlog
import typer
from rich.console import Console
from rich.tree import Tree

from canvas_shell.cli.client import RemoteClient
from canvas_shell.core.config import load_transport_config, resolve_config_path
from canvas_shell.core.config_schema import TransportSchema
from canvas_shell.core.logging import setup_logging

app = typer.Typer(
    name="canvas-shell",
    help="Canvas Shell - interactive client for the Canvas REST API.",
    rich_markup_mode="rich",
)

console = Console()


def _load_config(ctx: typer.Context) -> TransportSchema:
    return load_transport_config(ctx.obj.get("config_path") if ctx.obj else None)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to the transport config JSON file",
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """
    Canvas Shell.

    Issue commands against a Canvas server from an interactive prompt.
    Starts the interactive shell when no command is given.
    """
    if debug:
        setup_logging(level="DEBUG", format_type="console")
        console.print("[dim]Debug mode enabled[/dim]")
    elif verbose:
        setup_logging(level="INFO", format_type="console")
    else:
        setup_logging()

    structlog.contextvars.bind_contextvars(source="shell")

    ctx.obj = {"config_path": config_path}

    if ctx.invoked_subcommand is None:
        shell(ctx)


@app.command()
def shell(ctx: typer.Context) -> None:
    """
    Start interactive shell mode.

    Provides a REPL where each command is sent to the Canvas server.
    """
    from canvas_shell.cli.shell import run_shell

    asyncio.run(run_shell(_load_config(ctx), console))


@app.command()
def run(
    ctx: typer.Context,
    words: list[str] = typer.Argument(..., help="Shell command to execute, e.g. context tree"),
) -> None:
    """
    Run a single shell command and exit.

    Exits with status 1 if the command is unknown or the server reported an error.
    """
    from canvas_shell.cli.shell import run_line

    line = shlex.join(words)
    if not asyncio.run(run_line(_load_config(ctx), line, console)):
        raise typer.Exit(1)


@app.command()
def ping(ctx: typer.Context) -> None:
    """
    Simple ping to check if the Canvas server is reachable.

    Exits with status 1 if the server does not answer "pong".
    """
    config = _load_config(ctx)

    async def _ping() -> bool:
        async with RemoteClient(config) as client:
            return await client.ping()

    if asyncio.run(_ping()):
        console.print(f"[green]✓ Canvas server is reachable[/green] ({config.base_url})")
    else:
        console.print(f"[red]✗ Canvas server is not reachable[/red] ({config.base_url})")
        raise typer.Exit(1)


@app.command()
def config(ctx: typer.Context) -> None:
    """
    Display the effective transport configuration.

    The auth token is masked.
    """
    path = resolve_config_path(ctx.obj.get("config_path") if ctx.obj else None)
    effective = _load_config(ctx)

    data = effective.model_dump(by_alias=True)
    data["auth"]["token"] = _mask(data["auth"]["token"])

    tree = Tree(f"[bold cyan]transport[/bold cyan] [dim]({path})[/dim]")

    def add_items(parent: Tree, items: dict) -> None:
        for key, value in items.items():
            if isinstance(value, dict):
                branch = parent.add(f"[cyan]{key}[/cyan]")
                add_items(branch, value)
            else:
                parent.add(f"[cyan]{key}[/cyan]: {value}")

    add_items(tree, data)
    tree.add(f"[cyan]base_url[/cyan]: {effective.base_url}")
    console.print(tree)


def _mask(token: str) -> str:
    if len(token) <= 4:
        return "*" * len(token)
    return token[:2] + "*" * (len(token) - 4) + token[-2:]
