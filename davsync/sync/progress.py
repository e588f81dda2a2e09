"""Progress events emitted while a sync runs.

The engine reports what it is doing through a SyncProgressTracker, which
forwards structured events to a caller-supplied callback. The CLI uses this
to drive a Rich progress bar; tests use it to record the event stream.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class SyncProgressEvent(str, Enum):
    """Kinds of progress events."""

    SCAN_LOCAL_COMPLETE = "scan_local_complete"
    SCAN_REMOTE_COMPLETE = "scan_remote_complete"
    PLAN_READY = "plan_ready"
    DIRECTORY_CREATED = "directory_created"
    PHASE_START = "phase_start"
    FILE_COMPLETE = "file_complete"
    PHASE_COMPLETE = "phase_complete"


@dataclass
class SyncProgressInfo:
    """Payload of a progress event."""

    event: SyncProgressEvent
    phase: str = ""
    """Phase name ("add", "update" or "delete") for phase and file events"""

    path: str = ""
    """Relative path for file events, remote path for directory events"""

    phase_total: int = 0
    phase_done: int = 0
    files_done: int = 0
    """Files processed so far across all phases"""

    files_total: int = 0
    """Files to process across all phases"""


class SyncProgressTracker:
    """Keeps running counts and forwards events to a callback."""

    def __init__(self, callback: Optional[Callable[[SyncProgressInfo], None]] = None):
        self.callback = callback
        self.files_total = 0
        self.files_done = 0
        self._phase = ""
        self._phase_total = 0
        self._phase_done = 0

    def _emit(self, event: SyncProgressEvent, path: str = "", total: int = 0) -> None:
        info = SyncProgressInfo(
            event=event,
            phase=self._phase,
            path=path,
            phase_total=self._phase_total if not total else total,
            phase_done=self._phase_done,
            files_done=self.files_done,
            files_total=self.files_total,
        )
        if self.callback is not None:
            self.callback(info)

    def scan_complete(self, side: str, count: int) -> None:
        """Report that the local or remote inventory is built."""
        event = (
            SyncProgressEvent.SCAN_LOCAL_COMPLETE
            if side == "local"
            else SyncProgressEvent.SCAN_REMOTE_COMPLETE
        )
        self._emit(event, total=count)

    def plan_ready(self, total: int) -> None:
        """Report the number of operations in a validated plan."""
        self.files_total = total
        self.files_done = 0
        self._emit(SyncProgressEvent.PLAN_READY, total=total)

    def directory_created(self, remote_path: str) -> None:
        """Report a remote directory created during execution."""
        self._emit(SyncProgressEvent.DIRECTORY_CREATED, path=remote_path)

    def phase_start(self, phase: str, total: int) -> None:
        """Report the start of a phase."""
        self._phase = phase
        self._phase_total = total
        self._phase_done = 0
        self._emit(SyncProgressEvent.PHASE_START)

    def file_complete(self, relative_path: str) -> None:
        """Report one file processed in the current phase."""
        self._phase_done += 1
        self.files_done += 1
        self._emit(SyncProgressEvent.FILE_COMPLETE, path=relative_path)

    def phase_complete(self) -> None:
        """Report the end of the current phase."""
        self._emit(SyncProgressEvent.PHASE_COMPLETE)
