"""
Shell Commands.

Organized by API area.
"""

from canvas_shell.cli.registry import CommandRegistry


def build_registry() -> CommandRegistry:
    """Combine every command group into one registry."""
    from canvas_shell.cli.commands.context import registry as context_registry
    from canvas_shell.cli.commands.contexts import registry as contexts_registry
    from canvas_shell.cli.commands.documents import registry as documents_registry

    registry = CommandRegistry()
    registry.include(context_registry)
    registry.include(documents_registry)
    registry.include(contexts_registry)
    return registry


__all__ = ["build_registry"]
