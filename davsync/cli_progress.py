"""CLI progress display for sync operations.

This module provides a Rich-based progress display that works with
the SyncProgressTracker from the sync engine.
"""

from typing import Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from .api import WebDavClient
from .output import OutputFormatter
from .sync import SyncEngine, SyncPair, SyncResult
from .sync.progress import SyncProgressEvent, SyncProgressInfo, SyncProgressTracker

PHASE_LABELS = {
    "add": "Adding",
    "update": "Updating",
    "delete": "Deleting",
}


class SyncProgressDisplay:
    """Rich-based progress display for sync operations.

    Shows one bar over all planned operations, with the current phase and
    file in the description.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize the progress display.

        Args:
            console: Console to draw on; share it with other output so
                printed lines appear above the bar
        """
        self._console = console
        self._progress: Optional[Progress] = None
        self._task: Optional[TaskID] = None

    def create_tracker(self) -> SyncProgressTracker:
        """Create a SyncProgressTracker that updates this display.

        Returns:
            A configured SyncProgressTracker
        """
        return SyncProgressTracker(callback=self._handle_event)

    def _handle_event(self, info: SyncProgressInfo) -> None:
        """Handle a progress event from the tracker.

        Args:
            info: Progress information
        """
        if self._progress is None or self._task is None:
            return

        if info.event == SyncProgressEvent.PLAN_READY:
            self._progress.update(
                self._task,
                description="Syncing",
                total=info.files_total,
                completed=0,
            )

        elif info.event == SyncProgressEvent.PHASE_START:
            label = PHASE_LABELS.get(info.phase, info.phase)
            self._progress.update(
                self._task, description=f"{label} {info.phase_total} file(s)"
            )

        elif info.event == SyncProgressEvent.FILE_COMPLETE:
            label = PHASE_LABELS.get(info.phase, info.phase)
            self._progress.update(
                self._task,
                description=f"{label}: {info.path}",
                completed=info.files_done,
            )

    def __enter__(self) -> "SyncProgressDisplay":
        """Enter context manager - start progress display."""
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self._console,
            refresh_per_second=4,
        )
        self._progress.__enter__()
        self._task = self._progress.add_task("Preparing sync...", total=None)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit context manager - stop progress display."""
        if self._progress is not None:
            self._progress.__exit__(exc_type, exc_val, exc_tb)
            self._progress = None
            self._task = None


def run_sync_with_progress(
    client: WebDavClient, pair: SyncPair, output: OutputFormatter
) -> SyncResult:
    """Run a sync with a Rich progress display.

    Args:
        client: WebDAV client
        pair: SyncPair to sync
        output: Output formatter used for narration

    Returns:
        SyncResult of the run
    """
    with SyncProgressDisplay(console=output.console) as display:
        engine = SyncEngine(
            client,
            output,
            tracker=display.create_tracker(),
            scan_spinner=False,
        )
        return engine.sync_pair(pair)
