"""
Context Commands.

Commands for reading and changing the server-side current context.
"""

from urllib.parse import quote

from canvas_shell.cli.commands.base import fetch_and_render, send_and_render
from canvas_shell.cli.registry import Args, CommandRegistry
from canvas_shell.cli.shell import ShellContext

registry = CommandRegistry()


@registry.command("context", "Returns /context")
async def context(ctx: ShellContext, args: Args) -> bool:
    return await fetch_and_render(ctx, "/context")


@registry.command("context url", "Returns /context/url")
async def context_url(ctx: ShellContext, args: Args) -> bool:
    return await fetch_and_render(ctx, "/context/url")


@registry.command("context path", "Returns /context/path")
async def context_path(ctx: ShellContext, args: Args) -> bool:
    return await fetch_and_render(ctx, "/context/path")


@registry.command("context paths", "Returns /context/paths")
async def context_paths(ctx: ShellContext, args: Args) -> bool:
    return await fetch_and_render(ctx, "/context/paths")


@registry.command("context tree", "Returns /context/tree")
async def context_tree(ctx: ShellContext, args: Args) -> bool:
    return await fetch_and_render(ctx, "/context/tree")


@registry.command(
    "context list [abstraction]",
    "Returns all documents for the current context, or documents of type [abstraction] if given",
)
async def context_list(ctx: ShellContext, args: Args) -> bool:
    abstraction = args.get("abstraction")
    if abstraction:
        ctx.console.print(f"Fetching documents of type: {abstraction}", markup=False)
        return await fetch_and_render(ctx, f"/context/documents/{quote(abstraction, safe='')}")

    ctx.console.print("Fetching all documents for the current context")
    return await fetch_and_render(ctx, "/context/documents")


@registry.command("context bitmaps", "Returns /context/bitmaps")
async def context_bitmaps(ctx: ShellContext, args: Args) -> bool:
    return await fetch_and_render(ctx, "/context/bitmaps")


@registry.command("context set <path>", "Set context to the given path")
async def context_set(ctx: ShellContext, args: Args) -> bool:
    path = args["path"]
    ctx.console.print(f"Setting context to: {path}", markup=False)
    return await send_and_render(ctx, "/context/url", {"url": path}, optimistic_path=path)
