"""
Shared Command Helpers.

The two handler shapes every API command reduces to: fetch and render, or
send and render. Payloads that are strings print verbatim; anything else is
pretty-printed.
"""

from typing import Any

from rich.console import Console
from rich.pretty import Pretty
from rich.text import Text

from canvas_shell.cli.client import ClientError
from canvas_shell.cli.shell import ShellContext


def render_payload(console: Console, payload: Any) -> None:
    if isinstance(payload, str):
        console.print(payload, markup=False, highlight=False)
    else:
        console.print(Pretty(payload))


def render_error(console: Console, prefix: str, error: ClientError) -> None:
    console.print(Text(f"{prefix}: {error.message}", style="red"))


async def fetch_and_render(ctx: ShellContext, path: str) -> bool:
    """GET path and render the payload or the error."""
    result = await ctx.client.get(path)
    if isinstance(result, ClientError):
        render_error(ctx.console, "Error fetching data", result)
        return False
    render_payload(ctx.console, result.payload)
    return True


async def send_and_render(
    ctx: ShellContext,
    path: str,
    body: Any,
    optimistic_path: str | None = None,
) -> bool:
    """
    POST body to path and render the payload or the error.

    When optimistic_path is given the prompt shows it before the request is
    sent, whatever the outcome. The refresh that follows every command
    replaces it with the server's answer.
    """
    if optimistic_path is not None:
        ctx.synchronizer.show_path(optimistic_path)

    result = await ctx.client.post(path, body)
    if isinstance(result, ClientError):
        render_error(ctx.console, "Error posting data", result)
        return False
    render_payload(ctx.console, result.payload)
    return True
