"""Error taxonomy shared by both command-line clients."""

from enum import Enum


class ErrorKind(Enum):
    """Error kinds with their machine-readable code and process exit code."""

    CONFIG = ("CONFIG_ERROR", 1)
    AUTH = ("AUTH_FAILED", 2)
    NOT_FOUND = ("NOT_FOUND", 3)
    NETWORK = ("NETWORK_ERROR", 4)
    API = ("API_ERROR", 5)

    def __init__(self, code: str, exit_code: int):
        self.code = code
        self.exit_code = exit_code


class CliToolsError(Exception):
    """Base error with a stable code and a human message."""

    kind: ErrorKind = ErrorKind.API

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"{self.kind.code}: {message}")

    @property
    def code(self) -> str:
        return self.kind.code

    @property
    def exit_code(self) -> int:
        return self.kind.exit_code


class ConfigError(CliToolsError):
    """Missing or invalid local input; raised before any network call."""

    kind = ErrorKind.CONFIG


class AuthError(CliToolsError):
    kind = ErrorKind.AUTH


class NotFoundError(CliToolsError):
    kind = ErrorKind.NOT_FOUND


class NetworkError(CliToolsError):
    """Transport failure (DNS, refused connection, timeout)."""

    kind = ErrorKind.NETWORK


class ApiError(CliToolsError):
    """Unexpected status or a body that does not decode to the expected shape."""

    kind = ErrorKind.API
