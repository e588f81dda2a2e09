"""Exceptions raised by davsync."""

from typing import Optional


class DavSyncError(Exception):
    """Base exception for all davsync errors.

    Attributes:
        kind: Short name of the error kind, used when reporting a failed run
        path: Offending local or remote path, if any
    """

    kind = "DavSyncError"

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path and self.path not in self.message:
            return f"{self.message} ({self.path})"
        return self.message


class ConfigError(DavSyncError):
    """Configuration is missing or invalid."""

    kind = "ConfigError"


class FilesystemError(DavSyncError):
    """A local directory or file could not be read."""

    kind = "FilesystemError"


class ProtocolError(DavSyncError):
    """Remote transport, authentication or malformed-response failure."""

    kind = "ProtocolError"

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, path)
        self.status_code = status_code


class AuthenticationError(ProtocolError):
    """The server rejected the credentials."""

    kind = "ProtocolError"


class InvariantViolation(DavSyncError):
    """The computed sync plan is inconsistent with the inventories.

    This indicates a matching defect (typically duplicate relative paths)
    and is never expected during correct operation.
    """

    kind = "InvariantViolation"


class UnexpectedRemoteState(DavSyncError):
    """A file scheduled for addition already exists on the server."""

    kind = "UnexpectedRemoteState"
