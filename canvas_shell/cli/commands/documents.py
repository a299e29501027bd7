"""
Document Commands.

Commands for listing documents independent of the current context.
"""

from canvas_shell.cli.commands.base import fetch_and_render
from canvas_shell.cli.registry import Args, CommandRegistry
from canvas_shell.cli.shell import ShellContext

registry = CommandRegistry()


@registry.command("documents", "Returns /documents")
async def documents(ctx: ShellContext, args: Args) -> bool:
    return await fetch_and_render(ctx, "/documents")


@registry.command("documents notes", "Returns /documents/notes")
async def documents_notes(ctx: ShellContext, args: Args) -> bool:
    return await fetch_and_render(ctx, "/documents/notes")
