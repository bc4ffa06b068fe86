"""Exception types shared across serverpin modules."""

from __future__ import annotations

from typing import Optional


class ServerPinError(Exception):
    """Base exception with optional user-facing remediation text."""

    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def format(self) -> str:
        if self.hint:
            return f"{self.message} {self.hint}"
        return self.message


class VersionParseError(ServerPinError, ValueError):
    """Raised when a caller requires a server version and the text is not one."""


class NetworkError(ServerPinError):
    """Raised when the snapshot catalog cannot be retrieved."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class FetchCancelled(NetworkError):
    """Raised when the caller cancels an in-flight catalog fetch."""


class RuntimeScanError(ServerPinError):
    """Raised by a runtime enumeration backend that cannot complete a scan."""


class JavaNotFoundError(ServerPinError):
    """Raised when no configured, environment, search-path or installed Java is usable."""

    def __init__(self, message: str = "Unable to find a Java installation.") -> None:
        super().__init__(
            message,
            hint="Install a JDK, set JAVA_HOME, or configure the javaHome setting.",
        )
