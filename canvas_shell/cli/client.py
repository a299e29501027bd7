"""
HTTP Client for the Canvas REST API.

Provides the async HTTP client shared by every shell command.
All requests carry the configured bearer token and a JSON content type.

Every call returns a value: Success(payload) when the server answered with a
valid {"payload": ...} envelope, ClientError otherwise. Nothing raises past
RemoteClient.request().
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict

from canvas_shell.core.config_schema import TransportSchema
from canvas_shell.core.logging import get_logger, log_with_source

logger = get_logger(__name__)


class ErrorKind(str, Enum):
    """Failure categories for a remote call."""

    UNREACHABLE = "unreachable"
    TIMEOUT = "timeout"
    SERVER_ERROR = "server_error"
    PROTOCOL_ERROR = "protocol_error"


@dataclass(frozen=True)
class Success:
    payload: Any


@dataclass(frozen=True)
class ClientError:
    kind: ErrorKind
    message: str
    status: int | None = None


Result = Success | ClientError


class Envelope(BaseModel):
    """The {"payload": T} wrapper every endpoint returns on success."""

    payload: Any

    model_config = ConfigDict(extra="allow")


class RemoteClient:
    """
    HTTP client for Canvas REST API communication.

    Features:
    - Base URL, bearer token and timeout from the transport config
    - Structured logging of requests/responses
    - Failures returned as ClientError values

    Usage:
        async with RemoteClient(config) as client:
            result = await client.get("/context/path")
            result = await client.post("/context/url", {"url": "/work"})
    """

    def __init__(
        self,
        config: TransportSchema,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Validated transport configuration.
            transport: Optional httpx transport, used by tests to fake the server.
        """
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.timeout = config.timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "RemoteClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={
                    "Authorization": f"Bearer {self.config.auth.token}",
                    "Content-Type": "application/json",
                },
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _fail(
        self,
        kind: ErrorKind,
        message: str,
        method: str,
        path: str,
        status: int | None = None,
    ) -> ClientError:
        log_with_source(
            logger,
            "client",
            "info",
            "API request failed",
            method=method,
            path=path,
            kind=kind.value,
            status_code=status,
            error=message,
        )
        return ClientError(kind=kind, message=message, status=status)

    async def request(self, method: str, path: str, body: Any = None) -> Result:
        """
        Make an HTTP request to the Canvas server.

        Args:
            method: HTTP method (GET, POST)
            path: Server-relative route (e.g., /context/path)
            body: JSON-serialisable request body, if any

        Returns:
            Success with the unwrapped payload, or ClientError
        """
        log_with_source(logger, "client", "debug", "API request", method=method, path=path)

        try:
            client = await self._get_client()
            response = await client.request(method, path, json=body)
        except httpx.TimeoutException:
            return self._fail(
                ErrorKind.TIMEOUT,
                f"timeout of {self.config.timeout}ms exceeded",
                method,
                path,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return self._fail(ErrorKind.UNREACHABLE, str(e) or type(e).__name__, method, path)

        log_with_source(
            logger,
            "client",
            "debug",
            "API response",
            method=method,
            path=path,
            status_code=response.status_code,
        )

        if not response.is_success:
            return self._fail(
                ErrorKind.SERVER_ERROR,
                _error_message(response),
                method,
                path,
                status=response.status_code,
            )

        try:
            envelope = Envelope.model_validate(response.json())
        except ValueError:
            # Covers both undecodable JSON and envelope ValidationError.
            return self._fail(
                ErrorKind.PROTOCOL_ERROR,
                "Response does not match the {payload} envelope",
                method,
                path,
                status=response.status_code,
            )

        return Success(envelope.payload)

    async def get(self, path: str) -> Result:
        """Make a GET request."""
        return await self.request("GET", path)

    async def post(self, path: str, body: Any = None) -> Result:
        """Make a POST request."""
        return await self.request("POST", path, body)

    async def ping(self) -> bool:
        """True iff GET /ping answers 2xx with payload "pong"."""
        result = await self.get("/ping")
        return isinstance(result, Success) and result.payload == "pong"


def _error_message(response: httpx.Response) -> str:
    """Prefer the server's own message, fall back to the status line."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return f"Request failed with status code {response.status_code}"
