"""
Configuration Schemas.

Pydantic models defining the expected structure of each configuration source.
Used by the config loader to validate the merged configuration at load time.
A wrong type or out-of-range value raises a ValidationError at startup
instead of a cryptic failure on the first request.

    TransportSchema → ~/.canvas/config/transports.rest.json (merged over defaults)
    LoggingSchema   → canvas_shell/config/logging.yaml
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _FrozenBase(BaseModel):
    """Immutable after load. Unknown keys are ignored: the transport file is shared with the server."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


# =============================================================================
# transports.rest.json
# =============================================================================


class AuthSchema(_FrozenBase):
    type: str
    token: str


class TransportSchema(_FrozenBase):
    protocol: Literal["http", "https"]
    host: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)
    base_uri: str = Field(alias="baseUri")
    auth: AuthSchema
    timeout: int = Field(gt=0, description="Request timeout in milliseconds")

    @field_validator("base_uri")
    @classmethod
    def _leading_slash(cls, value: str) -> str:
        """"rest/v1" and "/rest/v1" address the same root."""
        return value if value.startswith("/") else f"/{value}"

    @property
    def base_url(self) -> str:
        """Fully qualified API root, e.g. http://127.0.0.1:8001/rest/v1."""
        return f"{self.protocol}://{self.host}:{self.port}{self.base_uri}"

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000


# =============================================================================
# logging.yaml
# =============================================================================


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class LoggingHandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    format: Literal["json", "console"]
    handlers: LoggingHandlersSchema
