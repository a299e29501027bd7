"""
Command Registry.

Maps command text to handlers. Commands are declared with a pattern such as
"context set <path>" or "context list [abstraction]": plain words form the
command name, <name> is a required argument and [name] an optional one.

Domain modules declare their own CommandRegistry and are combined with
include(), the same way command groups are added to a CLI app.

Usage:
    registry = CommandRegistry()

    @registry.command("context tree", "Returns /context/tree")
    async def context_tree(ctx, args):
        return await fetch_and_render(ctx, "/context/tree")

    descriptor, args = registry.match(["context", "tree"])
"""

from collections.abc import Awaitable, Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from canvas_shell.core.exceptions import UnknownCommandError, UsageError

if TYPE_CHECKING:
    from canvas_shell.cli.shell import ShellContext

Args = dict[str, str | None]
Handler = Callable[["ShellContext", Args], Awaitable[bool]]


@dataclass(frozen=True)
class ParamSpec:
    name: str
    required: bool = True

    @classmethod
    def parse(cls, token: str) -> "ParamSpec | None":
        """Return a ParamSpec for <name> or [name] tokens, None for plain words."""
        if token.startswith("<") and token.endswith(">"):
            return cls(token[1:-1], required=True)
        if token.startswith("[") and token.endswith("]"):
            return cls(token[1:-1], required=False)
        return None

    def __str__(self) -> str:
        return f"<{self.name}>" if self.required else f"[{self.name}]"


@dataclass(frozen=True)
class CommandDescriptor:
    name: str
    params: tuple[ParamSpec, ...]
    description: str
    handler: Handler

    @property
    def usage(self) -> str:
        return " ".join([self.name, *(str(p) for p in self.params)])

    def bind(self, values: Sequence[str]) -> Args:
        """
        Bind positional values to params.

        Raises:
            UsageError: On missing required or surplus arguments.
        """
        required = sum(1 for p in self.params if p.required)
        if len(values) < required:
            missing = [str(p) for p in self.params[len(values):] if p.required]
            raise UsageError(f"Missing required argument: {' '.join(missing)}", self.usage)
        if len(values) > len(self.params):
            raise UsageError(f"Too many arguments for '{self.name}'", self.usage)

        args: Args = {p.name: None for p in self.params}
        args.update(zip((p.name for p in self.params), values))
        return args


class CommandRegistry:
    """Ordered, name-keyed table of CommandDescriptors."""

    def __init__(self) -> None:
        self._commands: dict[str, CommandDescriptor] = {}

    def __iter__(self) -> Iterator[CommandDescriptor]:
        return iter(self._commands.values())

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def get(self, name: str) -> CommandDescriptor | None:
        return self._commands.get(name)

    def add(self, descriptor: CommandDescriptor) -> None:
        if descriptor.name in self._commands:
            raise ValueError(f"Command already registered: {descriptor.name}")
        self._commands[descriptor.name] = descriptor

    def command(self, pattern: str, description: str) -> Callable[[Handler], Handler]:
        """Decorator registering handler under pattern."""
        words: list[str] = []
        params: list[ParamSpec] = []
        for token in pattern.split():
            param = ParamSpec.parse(token)
            if param is not None:
                params.append(param)
            elif params:
                raise ValueError(f"Command words must precede arguments: {pattern}")
            else:
                words.append(token.lower())

        def decorator(handler: Handler) -> Handler:
            self.add(CommandDescriptor(" ".join(words), tuple(params), description, handler))
            return handler

        return decorator

    def include(self, other: "CommandRegistry") -> None:
        for descriptor in other:
            self.add(descriptor)

    def match(self, tokens: Sequence[str]) -> tuple[CommandDescriptor, Args]:
        """
        Resolve tokens to the longest registered command name and bind the rest.

        Raises:
            UnknownCommandError: If no prefix of tokens names a command.
            UsageError: If the argument count does not fit the command.
        """
        lowered = [t.lower() for t in tokens]
        for size in range(len(tokens), 0, -1):
            descriptor = self._commands.get(" ".join(lowered[:size]))
            if descriptor is None:
                continue
            if not descriptor.params and size < len(tokens):
                # "context foo" is an unknown subcommand, not a usage error.
                break
            return descriptor, descriptor.bind(tokens[size:])
        raise UnknownCommandError(" ".join(tokens))
