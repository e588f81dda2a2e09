"""Utility functions for davsync."""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

# =============================================================================
# Timestamp parsing utilities
# =============================================================================


def parse_http_date(timestamp_str: str) -> float:
    """Parse a WebDAV ``getlastmodified`` value into a Unix timestamp.

    Servers send RFC 1123 dates (e.g. "Tue, 15 Jan 2025 10:30:00 GMT"); a few
    send ISO 8601 instead, which is accepted as well.

    Args:
        timestamp_str: Date string as reported by the server

    Returns:
        Seconds since the epoch (UTC)

    Raises:
        ValueError: If the string cannot be parsed

    Examples:
        >>> parse_http_date("Thu, 01 Jan 1970 00:01:00 GMT")
        60.0
        >>> parse_http_date("1970-01-01T00:01:00Z")
        60.0
    """
    if not timestamp_str or not timestamp_str.strip():
        raise ValueError("Empty timestamp")

    value = timestamp_str.strip()

    try:
        dt = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        dt = None

    if dt is None:
        # The 'Z' suffix indicates UTC time
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(value)
        except ValueError as e:
            raise ValueError(f"Unrecognized timestamp: {timestamp_str!r}") from e

    # Naive values are UTC in both formats
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


# =============================================================================
# Remote path utilities
# =============================================================================


def normalize_remote_path(path: str) -> str:
    """Normalize a remote path to a leading slash and no trailing slash.

    Only "/" separates components; a backslash is an ordinary filename
    character, as it is in local POSIX names.

    Examples:
        >>> normalize_remote_path("site/docs/")
        '/site/docs'
        >>> normalize_remote_path("")
        '/'
        >>> normalize_remote_path("//a//b")
        '/a/b'
    """
    parts = [part for part in path.split("/") if part]
    return "/" + "/".join(parts)


def join_remote_path(root: str, relative_path: str) -> str:
    """Join a relative path onto a remote root.

    Examples:
        >>> join_remote_path("/site", "b/c.txt")
        '/site/b/c.txt'
        >>> join_remote_path("/", "a.txt")
        '/a.txt'
    """
    root = normalize_remote_path(root)
    relative_path = relative_path.strip("/")
    if not relative_path:
        return root
    if root == "/":
        return "/" + relative_path
    return f"{root}/{relative_path}"


def remote_ancestors(path: str) -> list[str]:
    """Return the ancestor directories of a remote path, root first.

    The server root ("/") is not included since it always exists.

    Examples:
        >>> remote_ancestors("/site/b/c.txt")
        ['/site', '/site/b']
        >>> remote_ancestors("/a.txt")
        []
    """
    parts = normalize_remote_path(path).strip("/").split("/")
    ancestors = []
    so_far = ""
    for part in parts[:-1]:
        so_far = f"{so_far}/{part}"
        ancestors.append(so_far)
    return ancestors


def strip_remote_root(full_path: str, root: str) -> str:
    """Strip the remote root prefix from a full remote path.

    Args:
        full_path: Full remote path of an entry
        root: Remote sync root

    Returns:
        Path relative to the root, using forward slashes

    Raises:
        ValueError: If the path is not below the root

    Examples:
        >>> strip_remote_root("/site/b/c.txt", "/site")
        'b/c.txt'
        >>> strip_remote_root("/a.txt", "/")
        'a.txt'
    """
    full_path = normalize_remote_path(full_path)
    root = normalize_remote_path(root)
    if root == "/":
        return full_path.lstrip("/")
    if full_path == root:
        return ""
    prefix = root + "/"
    if not full_path.startswith(prefix):
        raise ValueError(f"{full_path} is not below {root}")
    return full_path[len(prefix) :]


# =============================================================================
# Size formatting utilities
# =============================================================================


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"
