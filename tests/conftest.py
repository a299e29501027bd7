"""
Root Pytest Fixtures.

Shared fixtures available to all tests.

The Canvas server is faked with httpx.MockTransport: FakeCanvasServer maps
(method, route) to responses and records every request it receives. Routes
are relative to the configured baseUri, the way commands address them.
"""

import io
import json
import logging
from collections.abc import Callable
from typing import Any

import httpx
import pytest
from rich.console import Console

from canvas_shell.cli.client import RemoteClient
from canvas_shell.cli.session import PromptSynchronizer
from canvas_shell.cli.shell import InteractiveShell, ShellContext
from canvas_shell.cli.commands import build_registry
from canvas_shell.core.config import Settings, build_transport_config, get_settings
from canvas_shell.core.config_schema import TransportSchema

Responder = httpx.Response | Callable[[httpx.Request], httpx.Response]


class FakeCanvasServer:
    """In-memory stand-in for the Canvas REST API."""

    def __init__(self, base_uri: str = "/rest/v1") -> None:
        self.base_uri = base_uri
        self.routes: dict[tuple[str, str], Responder] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, route: str, responder: Responder) -> None:
        self.routes[(method.upper(), route)] = responder

    def payload(self, method: str, route: str, payload: Any) -> None:
        self.add(method, route, httpx.Response(200, json={"payload": payload}))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = request.url.path.removeprefix(self.base_uri)
        responder = self.routes.get((request.method, route))
        if responder is None:
            return httpx.Response(404, json={"message": f"No route for {route}"})
        if callable(responder):
            return responder(request)
        return httpx.Response(responder.status_code, headers=responder.headers, content=responder.content)

    @property
    def routes_called(self) -> list[str]:
        return [r.url.path.removeprefix(self.base_uri) for r in self.requests]

    def json_body(self, index: int) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch):
    """Keep CANVAS_* variables from the developer's shell out of tests."""
    monkeypatch.delenv("CANVAS_TOKEN", raising=False)
    monkeypatch.delenv("CANVAS_CONFIG_PATH", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def transport_config() -> TransportSchema:
    """Default transport configuration."""
    return build_transport_config({}, Settings())


@pytest.fixture
def server() -> FakeCanvasServer:
    """Fake server answering /ping and /context/path."""
    fake = FakeCanvasServer()
    fake.payload("GET", "/ping", "pong")
    fake.payload("GET", "/context/path", "/work")
    return fake


@pytest.fixture
def client(transport_config: TransportSchema, server: FakeCanvasServer) -> RemoteClient:
    """RemoteClient wired to the fake server."""
    return RemoteClient(transport_config, transport=httpx.MockTransport(server.handler))


@pytest.fixture
def console() -> Console:
    """Console recording output to a string buffer."""
    return Console(file=io.StringIO(), force_terminal=False, color_system=None, width=200)


@pytest.fixture
def shell_context(client: RemoteClient, console: Console) -> ShellContext:
    synchronizer = PromptSynchronizer(client, console=console)
    return ShellContext(client=client, synchronizer=synchronizer, console=console)


@pytest.fixture
def shell(shell_context: ShellContext) -> InteractiveShell:
    return InteractiveShell(shell_context, build_registry())


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """Undo handlers and level installed by setup_logging() during a test."""
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in saved_handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(saved_level)
