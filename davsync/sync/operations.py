"""Remote operations used by the sync engine."""

import logging
import os
from typing import Callable, Optional

from ..api import WebDavClient
from ..exceptions import FilesystemError
from ..utils import normalize_remote_path, remote_ancestors
from .scanner import LocalFile, RemoteFile

logger = logging.getLogger(__name__)


class SyncOperations:
    """Single-attempt remote operations with a per-run directory cache."""

    def __init__(
        self,
        client: WebDavClient,
        on_directory_created: Optional[Callable[[str], None]] = None,
    ):
        """Initialize sync operations.

        Args:
            client: WebDAV client
            on_directory_created: Optional callback receiving the remote path
                of every directory created
        """
        self.client = client
        self.on_directory_created = on_directory_created
        self._known_directories: set[str] = {"/"}

    def reset(self) -> None:
        """Forget which directories are known to exist."""
        self._known_directories = {"/"}

    def ensure_directory(self, remote_path: str) -> int:
        """Make sure a remote directory and all of its ancestors exist.

        Ancestors are checked from the root downward and created only if
        missing, so parents always precede children.

        Args:
            remote_path: Remote directory path

        Returns:
            Number of directories created
        """
        remote_path = normalize_remote_path(remote_path)
        chain = remote_ancestors(remote_path)
        if remote_path != "/":
            chain.append(remote_path)

        created = 0
        for directory in chain:
            if directory in self._known_directories:
                continue
            if not self.client.exists(directory):
                logger.debug("Creating remote directory %s", directory)
                self.client.create_directory(directory)
                created += 1
                if self.on_directory_created is not None:
                    self.on_directory_created(directory)
            self._known_directories.add(directory)
        return created

    def ensure_parents(self, remote_path: str) -> int:
        """Make sure every ancestor directory of a remote file exists.

        Returns:
            Number of directories created
        """
        ancestors = remote_ancestors(remote_path)
        if not ancestors:
            return 0
        return self.ensure_directory(ancestors[-1])

    def upload_file(
        self, local_file: LocalFile, remote_path: str, overwrite: bool
    ) -> None:
        """Upload a local file.

        Args:
            local_file: Local file to upload
            remote_path: Remote path of the target
            overwrite: Whether an existing target may be replaced

        Raises:
            FilesystemError: If the local file cannot be opened
            UnexpectedRemoteState: If overwrite is False and the target exists
            ProtocolError: On any other remote failure
        """
        try:
            stream = open(local_file.path, "rb")
        except OSError as e:
            raise FilesystemError(
                f"Cannot open file for upload: {e}", str(local_file.path)
            ) from e

        with stream:
            size = os.fstat(stream.fileno()).st_size
            self.client.put_file(remote_path, stream, overwrite=overwrite, size=size)

    def delete_remote(self, remote_file: RemoteFile) -> None:
        """Delete a remote file at its listed path."""
        self.client.delete_file(remote_file.path)
