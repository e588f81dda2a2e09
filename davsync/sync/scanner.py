"""Directory scanning utilities for sync operations."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..api import WebDavClient
from ..exceptions import FilesystemError, ProtocolError
from ..models import RemoteEntry
from ..utils import normalize_remote_path, parse_http_date, strip_remote_root

logger = logging.getLogger(__name__)


@dataclass
class LocalFile:
    """Represents a local file with metadata."""

    path: Path
    """Absolute path to the file"""

    relative_path: str
    """Relative path (using forward slashes for cross-platform compatibility)"""

    size: int
    """File size in bytes"""

    mtime: float
    """Last modification time (Unix timestamp)"""

    @property
    def storage_location(self) -> str:
        """Location used for I/O."""
        return str(self.path)

    @classmethod
    def from_path(cls, file_path: Path, base_path: Path) -> "LocalFile":
        """Create LocalFile from a path.

        Args:
            file_path: Absolute path to the file
            base_path: Base path for calculating relative paths

        Returns:
            LocalFile instance

        Raises:
            FilesystemError: If the file cannot be stat'ed or is not readable
        """
        try:
            stat = file_path.stat()
        except OSError as e:
            raise FilesystemError(f"Cannot read file: {e}", str(file_path)) from e
        if not os.access(file_path, os.R_OK):
            raise FilesystemError(
                "Cannot read file: permission denied", str(file_path)
            )

        return cls(
            path=file_path,
            relative_path=file_path.relative_to(base_path).as_posix(),
            size=stat.st_size,
            mtime=stat.st_mtime,
        )


@dataclass
class RemoteFile:
    """Represents a remote file with metadata."""

    entry: RemoteEntry
    """Remote entry from the listing"""

    relative_path: str
    """Path relative to the remote sync root"""

    mtime: float
    """Last modification time (Unix timestamp), parsed from the listing"""

    @property
    def path(self) -> str:
        """Full remote path."""
        return self.entry.full_path

    @property
    def storage_location(self) -> str:
        """Location used for I/O."""
        return self.entry.full_path

    @property
    def size(self) -> Optional[int]:
        """File size in bytes, if the server reported it."""
        return self.entry.size

    @classmethod
    def from_entry(cls, entry: RemoteEntry, remote_root: str) -> "RemoteFile":
        """Create RemoteFile from a listing entry.

        Args:
            entry: Remote entry
            remote_root: Remote sync root the entry was listed under

        Returns:
            RemoteFile instance

        Raises:
            ProtocolError: If the entry lies outside the root or its
                modification time cannot be parsed
        """
        try:
            relative_path = strip_remote_root(entry.full_path, remote_root)
        except ValueError as e:
            raise ProtocolError(
                f"Listing returned an entry outside the root: {e}",
                entry.full_path,
            ) from e
        if not relative_path:
            raise ProtocolError("Remote root is not a directory", entry.full_path)

        try:
            mtime = parse_http_date(entry.last_modified)
        except ValueError as e:
            raise ProtocolError(
                f"Invalid last-modified value {entry.last_modified!r}",
                entry.full_path,
            ) from e

        return cls(entry=entry, relative_path=relative_path, mtime=mtime)


class DirectoryScanner:
    """Builds the local and remote file inventories.

    Examples:
        >>> scanner = DirectoryScanner()
        >>> local_files = scanner.scan_local(Path("/srv/site"))
        >>> remote_files = scanner.scan_remote(client, "/www")
    """

    def __init__(self, exclude_dot_files: bool = False):
        """Initialize directory scanner.

        Args:
            exclude_dot_files: Whether to exclude files/folders starting with dot
        """
        self.exclude_dot_files = exclude_dot_files

    def should_ignore(self, path: Path) -> bool:
        """Check if a local path should be left out of the inventory."""
        return self.exclude_dot_files and path.name.startswith(".")

    def scan_local(self, directory: Path) -> list[LocalFile]:
        """Scan a local directory tree.

        Directories are visited from an explicit worklist rather than by
        recursion, so deep trees do not grow the call stack. Symlinks to
        files are followed, symlinked directories are not descended into,
        and other special files are skipped.

        Args:
            directory: Root directory to scan

        Returns:
            List of LocalFile objects, one per regular file

        Raises:
            FilesystemError: If the root or any directory or file below it
                cannot be read
        """
        if not directory.exists():
            raise FilesystemError("Local directory does not exist", str(directory))
        if not directory.is_dir():
            raise FilesystemError("Local path is not a directory", str(directory))

        files: list[LocalFile] = []
        pending: list[Path] = [directory]
        index = 0

        while index < len(pending):
            current = pending[index]
            index += 1

            try:
                children = sorted(current.iterdir())
            except OSError as e:
                raise FilesystemError(
                    f"Cannot read directory: {e}", str(current)
                ) from e

            for item in children:
                if self.should_ignore(item):
                    continue

                if item.is_dir():
                    if item.is_symlink():
                        logger.debug("Not following directory symlink: %s", item)
                        continue
                    pending.append(item)
                elif item.is_file():
                    files.append(LocalFile.from_path(item, directory))
                else:
                    logger.debug("Skipping special file: %s", item)

        logger.debug(
            "Scanned %d director(y/ies), found %d file(s) under %s",
            len(pending),
            len(files),
            directory,
        )
        return files

    def scan_remote(self, client: WebDavClient, remote_root: str) -> list[RemoteFile]:
        """Scan a remote directory tree.

        A missing remote root yields an empty inventory; it is created when
        the plan is executed.

        Args:
            client: WebDAV client
            remote_root: Remote root directory

        Returns:
            List of RemoteFile objects, one per file (directories excluded)

        Raises:
            ProtocolError: On transport failure or malformed listing
        """
        remote_root = normalize_remote_path(remote_root)

        if remote_root != "/" and not client.exists(remote_root):
            logger.debug("Remote root %s does not exist yet", remote_root)
            return []

        remote_files: list[RemoteFile] = []
        for entry in client.list_recursive(remote_root):
            # Only include files, not folders
            if entry.is_directory:
                continue
            remote_files.append(RemoteFile.from_entry(entry, remote_root))

        return remote_files
