"""
Interactive Shell Mode.

Provides the REPL that turns input lines into Canvas REST calls.
Uses Rich for output formatting and basic input handling.

One line is processed at a time:

    AWAITING_INPUT -> PARSING -> DISPATCHING -> AWAITING_INPUT

and CLOSED on exit/quit or end of input. After every dispatched command the
prompt is refreshed from the server before the next line is read, whether
the command succeeded or not. A blank line only refreshes the prompt.
"""

import shlex
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from canvas_shell.cli.client import RemoteClient
from canvas_shell.cli.commands import build_registry
from canvas_shell.cli.registry import Args, CommandDescriptor, CommandRegistry
from canvas_shell.cli.session import PromptSynchronizer
from canvas_shell.core.config_schema import TransportSchema
from canvas_shell.core.exceptions import UnknownCommandError, UsageError
from canvas_shell.core.logging import get_logger, log_with_source

logger = get_logger(__name__)


@dataclass(frozen=True)
class ShellContext:
    """Everything a command handler may touch, constructed once per session."""

    client: RemoteClient
    synchronizer: PromptSynchronizer
    console: Console


class ShellState(str, Enum):
    AWAITING_INPUT = "awaiting_input"
    PARSING = "parsing"
    DISPATCHING = "dispatching"
    CLOSED = "closed"


class InteractiveShell:
    """
    Interactive shell for Canvas commands.

    Usage:
        shell = InteractiveShell(context, build_registry())
        await shell.run()
    """

    def __init__(self, context: ShellContext, registry: CommandRegistry) -> None:
        self.context = context
        self.registry = registry
        self.console = context.console
        self.state = ShellState.AWAITING_INPUT
        self.builtins: dict[str, Callable[[], Awaitable[None]]] = {
            "help": self._cmd_help,
            "clear": self._cmd_clear,
            "quit": self._cmd_quit,
            "exit": self._cmd_quit,
        }

    async def run(self) -> None:
        """Run the interactive shell until exit or end of input."""
        self.state = ShellState.AWAITING_INPUT
        await self._welcome()
        await self.context.synchronizer.refresh()

        while self.state is not ShellState.CLOSED:
            try:
                line = self.console.input(self.context.synchronizer.prompt())
            except KeyboardInterrupt:
                self.console.print("\n[dim]Use 'quit' to exit[/dim]")
                continue
            except EOFError:
                break

            await self.execute(line)

        self.state = ShellState.CLOSED
        self.console.print("[dim]Goodbye![/dim]")

    async def execute(self, line: str) -> bool:
        """
        Parse and run a single input line.

        Returns:
            False if the line could not be parsed or the command reported an error.
        """
        line = line.strip()
        if not line:
            # Pressing enter re-syncs the prompt with the server.
            await self.context.synchronizer.refresh()
            return True

        self.state = ShellState.PARSING
        try:
            try:
                tokens = shlex.split(line)
            except ValueError as e:
                self.console.print(Text(f"Error: {e}", style="red"))
                return False

            builtin = self.builtins.get(tokens[0].lower()) if len(tokens) == 1 else None
            if builtin is not None:
                await builtin()
                return True

            try:
                descriptor, args = self.registry.match(tokens)
            except UnknownCommandError as e:
                self.console.print(Text(e.message, style="red"))
                self.console.print("Type [cyan]help[/cyan] for available commands.")
                return False
            except UsageError as e:
                self.console.print(Text(e.message, style="red"))
                self.console.print(Text(f"Usage: {e.usage}", style="dim"))
                return False

            self.state = ShellState.DISPATCHING
            ok = await self._invoke(descriptor, args)
            await self.context.synchronizer.refresh()
            return ok
        finally:
            if self.state is not ShellState.CLOSED:
                self.state = ShellState.AWAITING_INPUT

    async def _invoke(self, descriptor: CommandDescriptor, args: Args) -> bool:
        log_with_source(logger, "shell", "debug", "Command dispatched", command=descriptor.name, args=args)
        try:
            return await descriptor.handler(self.context, args)
        except Exception as e:
            log_with_source(logger, "shell", "error", "Command failed", command=descriptor.name, error=str(e))
            self.console.print(Text(f"Error: {e}", style="red"))
            return False

    async def _welcome(self) -> None:
        client = self.context.client
        if await client.ping():
            status = "[green]reachable[/green]"
        else:
            status = "[red]not reachable[/red]"

        self.console.print(Panel(
            "[bold]Canvas Shell[/bold]\n"
            f"Server: {client.base_url} ({status})\n"
            "Type [cyan]help[/cyan] for available commands, [cyan]quit[/cyan] to exit.",
            title="Welcome",
        ))

    async def _cmd_help(self) -> None:
        """Display help information."""
        table = Table(title="Available Commands", show_header=True)
        table.add_column("Command", style="cyan")
        table.add_column("Description")

        for descriptor in self.registry:
            table.add_row(Text(descriptor.usage), Text(descriptor.description))
        table.add_row("help", "Show this help message")
        table.add_row("clear", "Clear the screen")
        table.add_row("quit / exit", "Exit the shell")

        self.console.print(table)

    async def _cmd_clear(self) -> None:
        """Clear the screen."""
        self.console.clear()

    async def _cmd_quit(self) -> None:
        """Exit the shell."""
        self.state = ShellState.CLOSED


def create_shell(client: RemoteClient, console: Console | None = None) -> InteractiveShell:
    """Wire client, synchronizer and registry into a ready shell."""
    console = console or Console()
    synchronizer = PromptSynchronizer(client, console=console)
    context = ShellContext(client=client, synchronizer=synchronizer, console=console)
    return InteractiveShell(context, build_registry())


async def run_shell(config: TransportSchema, console: Console | None = None) -> None:
    """Run the interactive shell."""
    async with RemoteClient(config) as client:
        await create_shell(client, console).run()


async def run_line(config: TransportSchema, line: str, console: Console | None = None) -> bool:
    """Execute one shell line without entering the REPL."""
    async with RemoteClient(config) as client:
        shell = create_shell(client, console)
        return await shell.execute(line)
