"""
Custom Exceptions.

Exceptions raised and handled inside the shell process.
Remote call failures are not exceptions: see canvas_shell.cli.client.ClientError.
"""


class ShellError(Exception):
    """Base exception for all shell errors."""

    def __init__(self, message: str, code: str = "SHELL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class ConfigError(ShellError):
    """Raised when the config file exists but cannot be parsed or validated."""

    def __init__(self, message: str = "Invalid configuration") -> None:
        super().__init__(message, code="CFG_INVALID")


class UnknownCommandError(ShellError):
    """Raised when an input line matches no registered command."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Unknown command: {text}", code="CMD_UNKNOWN")


class UsageError(ShellError):
    """Raised when a command is given the wrong number of arguments."""

    def __init__(self, message: str, usage: str) -> None:
        self.usage = usage
        super().__init__(message, code="CMD_USAGE")
