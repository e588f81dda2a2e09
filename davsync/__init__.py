"""davsync - mirror a local directory onto a WebDAV server."""

from .api import WebDavClient
from .exceptions import (
    AuthenticationError,
    ConfigError,
    DavSyncError,
    FilesystemError,
    InvariantViolation,
    ProtocolError,
    UnexpectedRemoteState,
)
from .models import RemoteEntry

__version__ = "0.1.0"

__all__ = [
    "WebDavClient",
    "RemoteEntry",
    "DavSyncError",
    "AuthenticationError",
    "ConfigError",
    "FilesystemError",
    "InvariantViolation",
    "ProtocolError",
    "UnexpectedRemoteState",
]
