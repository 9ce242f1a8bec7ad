"""Custom exceptions for deployment_launcher.

Provides clear, actionable error messages for common failure scenarios.
"""

from enum import Enum
from pathlib import Path
from typing import Optional


class LauncherError(Exception):
    """Base exception for deployment launcher errors."""

    pass


class ErrorKind(str, Enum):
    """Classification of a platform API fault."""

    NOT_FOUND = "NOT_FOUND"
    RESOURCE_EXHAUSTED = "RESOURCE_EXHAUSTED"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_status(cls, status: Optional[str], http_status: int) -> "ErrorKind":
        """Map an RPC status name, falling back to the HTTP status code."""
        if status:
            try:
                return cls(status.upper())
            except ValueError:
                pass

        return {
            401: cls.UNAUTHENTICATED,
            404: cls.NOT_FOUND,
            429: cls.RESOURCE_EXHAUSTED,
        }.get(http_status, cls.UNKNOWN)


class PlatformError(LauncherError):
    """Raised when a platform API call fails.

    Callers branch on ``kind``; ``detail`` is the remote message verbatim.
    """

    def __init__(self, kind: ErrorKind, detail: str = ""):
        self.kind = kind
        self.detail = detail
        super().__init__(f"{kind.value}: {detail}" if detail else kind.value)


class CredentialError(LauncherError):
    """Raised when a refresh token file cannot be read."""

    def __init__(self, path: Path, reason: str = ""):
        self.path = path
        message = f"Unable to read refresh token from {path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class SnapshotNotFoundError(LauncherError):
    """Raised when a snapshot file is missing, unreadable or empty."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Unable to load {path}. Does the file exist?")


class SnapshotUploadError(LauncherError):
    """Raised when the snapshot bytes are rejected by the upload target."""

    pass


class LaunchConfigError(LauncherError):
    """Raised when a launch configuration cannot be parsed or has an unexpected shape."""

    pass
