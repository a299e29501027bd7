"""
Contexts Commands.
"""

from canvas_shell.cli.commands.base import fetch_and_render
from canvas_shell.cli.registry import Args, CommandRegistry
from canvas_shell.cli.shell import ShellContext

registry = CommandRegistry()


@registry.command("list", "Returns /contexts")
async def list_contexts(ctx: ShellContext, args: Args) -> bool:
    return await fetch_and_render(ctx, "/contexts")
