"""File comparison logic for sync operations."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from ..exceptions import InvariantViolation
from .scanner import LocalFile, RemoteFile

logger = logging.getLogger(__name__)


class SyncAction(str, Enum):
    """Actions that can be taken during sync."""

    ADD = "add"
    """Upload a local file that does not exist remotely"""

    UPDATE = "update"
    """Overwrite a remote file with a newer local version"""

    DELETE = "delete"
    """Delete a remote file that no longer exists locally"""

    SKIP = "skip"
    """File is unchanged (no action needed)"""


@dataclass
class SyncPlan:
    """The operations needed to make the remote tree match the local one.

    The three operation lists are disjoint by relative path. Files present
    on both sides whose local copy is not newer are kept in ``unchanged``
    for reporting only.
    """

    to_add: list[LocalFile] = field(default_factory=list)
    """Local files missing remotely"""

    to_update: list[LocalFile] = field(default_factory=list)
    """Local files newer than their remote counterpart"""

    to_delete: list[RemoteFile] = field(default_factory=list)
    """Remote files missing locally"""

    unchanged: list[str] = field(default_factory=list)
    """Relative paths present on both sides with the local copy not newer"""

    @property
    def is_empty(self) -> bool:
        """Check whether there is nothing to do."""
        return not (self.to_add or self.to_update or self.to_delete)

    def paths(self, action: SyncAction) -> list[str]:
        """Relative paths scheduled for an action."""
        if action == SyncAction.ADD:
            return [f.relative_path for f in self.to_add]
        if action == SyncAction.UPDATE:
            return [f.relative_path for f in self.to_update]
        if action == SyncAction.DELETE:
            return [f.relative_path for f in self.to_delete]
        return list(self.unchanged)

    def counts(self) -> dict[str, int]:
        """Number of files per action."""
        return {
            "adds": len(self.to_add),
            "updates": len(self.to_update),
            "deletes": len(self.to_delete),
            "skips": len(self.unchanged),
        }


class FileComparator:
    """Compares local and remote inventories to build a sync plan.

    Local wins: a file present on both sides is updated only when the local
    modification time is strictly greater than the remote one.
    """

    def compare(
        self,
        local_files: Sequence[LocalFile],
        remote_files: Sequence[RemoteFile],
    ) -> SyncPlan:
        """Build and validate a sync plan.

        Args:
            local_files: Local inventory
            remote_files: Remote inventory

        Returns:
            Validated SyncPlan

        Raises:
            InvariantViolation: If either inventory contains a duplicate
                relative path or the plan fails the count check
        """
        self._check_unique(local_files, "local")
        self._check_unique(remote_files, "remote")

        remote_by_path = {f.relative_path: f for f in remote_files}
        local_paths = {f.relative_path for f in local_files}

        plan = SyncPlan()
        for local_file in local_files:
            remote_file = remote_by_path.get(local_file.relative_path)
            if remote_file is None:
                plan.to_add.append(local_file)
            elif local_file.mtime > remote_file.mtime:
                plan.to_update.append(local_file)
            else:
                plan.unchanged.append(local_file.relative_path)

        for remote_file in remote_files:
            if remote_file.relative_path not in local_paths:
                plan.to_delete.append(remote_file)

        self.validate(plan, local_files, remote_files)

        logger.debug(
            "Plan: %d to add, %d to update, %d to delete, %d unchanged",
            len(plan.to_add),
            len(plan.to_update),
            len(plan.to_delete),
            len(plan.unchanged),
        )
        return plan

    def validate(
        self,
        plan: SyncPlan,
        local_files: Sequence[LocalFile],
        remote_files: Sequence[RemoteFile],
    ) -> None:
        """Check that the plan partitions the two inventories consistently.

        After execution the remote file count must equal the local one:
        ``len(remote) + len(to_add) - len(to_delete) == len(local)``.

        Raises:
            InvariantViolation: If the check fails
        """
        expected = len(remote_files) + len(plan.to_add) - len(plan.to_delete)
        if expected != len(local_files):
            raise InvariantViolation(
                "Error calculating diff: the server file count after sync "
                f"would be {expected}, but there are {len(local_files)} "
                "local files"
            )

    def _check_unique(self, files: Sequence, side: str) -> None:
        counts = Counter(f.relative_path for f in files)
        duplicates = sorted(path for path, count in counts.items() if count > 1)
        if duplicates:
            raise InvariantViolation(
                f"Duplicate relative path in {side} inventory", duplicates[0]
            )
