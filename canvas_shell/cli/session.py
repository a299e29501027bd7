"""
Session State and Prompt Synchronization.

The prompt mirrors the server's current context path. SessionState holds the
last-known value; PromptSynchronizer is its only writer.

Refreshes are ordered by a monotonically increasing token: a result is
applied only if no newer refresh (or optimistic update) was started after it.
A slow, stale response can therefore never overwrite a newer one.
"""

import itertools
from dataclasses import dataclass

from rich.console import Console
from rich.text import Text

from canvas_shell.cli.client import ClientError, RemoteClient
from canvas_shell.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

CONTEXT_PATH_ROUTE = "/context/path"
UNREACHABLE_PROMPT = "Canvas Server not reachable"
PROMPT_STYLE = "bold #FF69B4"


@dataclass
class SessionState:
    """Last-known prompt state. Written only by PromptSynchronizer."""

    display_path: str = ""
    reachable: bool = False


def render_prompt(state: SessionState) -> Text:
    """Render the prompt as '[<path>] > ', or the unreachable placeholder."""
    label = state.display_path if state.reachable else UNREACHABLE_PROMPT
    return Text(f"[{label}] > ", style=PROMPT_STYLE)


class PromptSynchronizer:
    """
    Keeps SessionState in step with the server's context path.

    Usage:
        synchronizer = PromptSynchronizer(client, console=console)
        await synchronizer.refresh()
        line = console.input(synchronizer.prompt())
    """

    def __init__(
        self,
        client: RemoteClient,
        state: SessionState | None = None,
        console: Console | None = None,
    ) -> None:
        self.client = client
        self.state = state or SessionState()
        self.console = console or Console()
        self._tokens = itertools.count(1)
        self._latest = 0

    def _issue_token(self) -> int:
        self._latest = next(self._tokens)
        return self._latest

    def _is_current(self, token: int) -> bool:
        return token == self._latest

    async def refresh(self) -> None:
        """
        Fetch the server's context path and update the prompt.

        Never raises. On failure the prompt falls back to the unreachable
        placeholder and the reason is printed to the session output.
        """
        token = self._issue_token()
        result = await self.client.get(CONTEXT_PATH_ROUTE)

        if not self._is_current(token):
            log_with_source(logger, "shell", "debug", "Discarding superseded prompt refresh", token=token)
            return

        if isinstance(result, ClientError):
            self._apply_failure(result.message)
            return

        if not isinstance(result.payload, str):
            self._apply_failure(f"unexpected context path payload: {result.payload!r}")
            return

        self.state.display_path = result.payload
        self.state.reachable = True

    def _apply_failure(self, reason: str) -> None:
        self.state.reachable = False
        self.console.print(Text(f"Error fetching context path: {reason}", style="red"))
        log_with_source(logger, "shell", "info", "Prompt refresh failed", error=reason)

    def show_path(self, path: str) -> None:
        """
        Display path immediately, ahead of the server confirming it.

        Supersedes any refresh still in flight.
        """
        self._issue_token()
        self.state.display_path = path
        self.state.reachable = True

    def prompt(self) -> Text:
        """Current prompt text."""
        return render_prompt(self.state)
