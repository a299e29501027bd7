"""Unit tests for the interactive shell loop."""

from unittest.mock import MagicMock

import httpx
import pytest

from canvas_shell.cli.registry import CommandRegistry
from canvas_shell.cli.session import SessionState
from canvas_shell.cli.shell import InteractiveShell, ShellState, create_shell


class TestExecute:
    """Tests for single-line dispatch."""

    @pytest.mark.asyncio
    async def test_command_then_refresh(self, shell, server):
        server.payload("GET", "/context/tree", {"children": []})

        assert await shell.execute("context tree") is True

        assert server.routes_called == ["/context/tree", "/context/path"]
        assert shell.context.synchronizer.state == SessionState("/work", True)
        assert shell.state is ShellState.AWAITING_INPUT

    @pytest.mark.asyncio
    async def test_refresh_after_failed_command(self, shell, server, console):
        server.add("GET", "/documents", httpx.Response(500, json={"message": "db down"}))

        assert await shell.execute("documents") is False

        assert server.routes_called == ["/documents", "/context/path"]
        assert "Error fetching data: db down" in console.file.getvalue()

    @pytest.mark.asyncio
    async def test_unknown_command_has_no_side_effects(self, shell, server, console):
        before = SessionState(**vars(shell.context.synchronizer.state))

        assert await shell.execute("frobnicate now") is False

        assert "Unknown command: frobnicate now" in console.file.getvalue()
        assert server.requests == []
        assert shell.context.synchronizer.state == before
        assert shell.state is ShellState.AWAITING_INPUT

    @pytest.mark.asyncio
    async def test_missing_argument_prints_usage(self, shell, server, console):
        assert await shell.execute("context set") is False

        output = console.file.getvalue()
        assert "Missing required argument: <path>" in output
        assert "Usage: context set <path>" in output
        assert server.requests == []

    @pytest.mark.asyncio
    async def test_unbalanced_quotes(self, shell, server, console):
        assert await shell.execute('context set "/open') is False

        assert "Error:" in console.file.getvalue()
        assert server.requests == []

    @pytest.mark.asyncio
    async def test_blank_line_refreshes_prompt(self, shell, server):
        assert await shell.execute("   ") is True

        assert server.routes_called == ["/context/path"]
        assert shell.context.synchronizer.prompt().plain == "[/work] > "

    @pytest.mark.asyncio
    async def test_handler_exception_still_refreshes(self, shell_context, server, console):
        registry = CommandRegistry()

        @registry.command("explode", "Raises")
        async def explode(ctx, args):
            raise RuntimeError("kaboom")

        shell = InteractiveShell(shell_context, registry)

        assert await shell.execute("explode") is False

        assert "Error: kaboom" in console.file.getvalue()
        assert server.routes_called == ["/context/path"]
        assert shell.state is ShellState.AWAITING_INPUT

    @pytest.mark.asyncio
    async def test_state_while_dispatching(self, shell_context):
        registry = CommandRegistry()
        seen = []

        shell = InteractiveShell(shell_context, registry)

        @registry.command("probe", "Records shell state")
        async def probe(ctx, args):
            seen.append(shell.state)
            return True

        await shell.execute("probe")

        assert seen == [ShellState.DISPATCHING]


class TestBuiltins:
    @pytest.mark.asyncio
    async def test_help_lists_commands(self, shell, server, console):
        assert await shell.execute("help") is True

        output = console.file.getvalue()
        assert "context set <path>" in output
        assert "context list [abstraction]" in output
        assert "Set context to the given path" in output
        assert server.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("word", ["quit", "exit", "EXIT"])
    async def test_quit_closes(self, shell, word):
        await shell.execute(word)
        assert shell.state is ShellState.CLOSED


class TestRun:
    """Tests for the read-eval loop."""

    @pytest.mark.asyncio
    async def test_session_until_end_of_input(self, shell, server, console, monkeypatch):
        server.payload("GET", "/context", {"id": "ctx"})
        prompts = []

        def fake_input(prompt):
            prompts.append(prompt.plain)
            if len(prompts) == 1:
                return "context"
            raise EOFError

        monkeypatch.setattr(console, "input", fake_input)

        await shell.run()

        assert shell.state is ShellState.CLOSED
        assert server.routes_called == ["/ping", "/context/path", "/context", "/context/path"]
        assert prompts == ["[/work] > ", "[/work] > "]
        output = console.file.getvalue()
        assert "reachable" in output
        assert "Goodbye!" in output

    @pytest.mark.asyncio
    async def test_unreachable_server_keeps_session_alive(self, shell, server, console, monkeypatch):
        server.add("GET", "/ping", httpx.Response(502))
        server.add("GET", "/context/path", httpx.Response(502))
        monkeypatch.setattr(console, "input", MagicMock(side_effect=["list", "quit"]))

        await shell.run()

        output = console.file.getvalue()
        assert "not reachable" in output
        assert "Error fetching context path" in output
        assert shell.context.synchronizer.prompt().plain == "[Canvas Server not reachable] > "
        assert shell.state is ShellState.CLOSED

    @pytest.mark.asyncio
    async def test_keyboard_interrupt_does_not_exit(self, shell, console, monkeypatch):
        monkeypatch.setattr(console, "input", MagicMock(side_effect=[KeyboardInterrupt, "exit"]))

        await shell.run()

        assert "Use 'quit' to exit" in console.file.getvalue()
        assert shell.state is ShellState.CLOSED


class TestCreateShell:
    def test_wires_shared_console(self, client, console):
        shell = create_shell(client, console)

        assert shell.console is console
        assert shell.context.synchronizer.console is console
        assert shell.context.client is client
        assert "context set" in shell.registry
