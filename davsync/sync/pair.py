"""Sync pair: the local and remote roots of one synchronization."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from ..utils import normalize_remote_path


@dataclass
class SyncPair:
    """A local directory mirrored onto a remote directory.

    Examples:
        >>> pair = SyncPair(local="./site", remote="www/")
        >>> pair.remote
        '/www'
    """

    local: Path
    """Local root directory"""

    remote: str
    """Remote root directory (normalized to a leading slash)"""

    exclude_dot_files: bool = False
    """Whether to skip local files and folders starting with a dot"""

    def __post_init__(self) -> None:
        if not isinstance(self.local, Path):
            self.local = Path(self.local)
        self.remote = normalize_remote_path(self.remote)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SyncPair":
        """Create a SyncPair from a dictionary.

        Accepts both the CLI-style keys ("local-dir", "server-dir",
        "exclude-dot-files") and the plain keys ("local", "remote",
        "excludeDotFiles").
        """
        local: Union[str, Path, None] = data.get("local", data.get("local-dir"))
        remote = data.get("remote", data.get("server-dir"))
        if local is None or remote is None:
            raise ValueError("Sync pair requires a local and a remote directory")
        exclude = data.get("excludeDotFiles", data.get("exclude-dot-files", False))
        # Deploy-style configs pass flags as strings
        if isinstance(exclude, str):
            exclude = exclude.strip().lower() in ("true", "1", "yes")
        return cls(
            local=Path(local),
            remote=remote,
            exclude_dot_files=bool(exclude),
        )
