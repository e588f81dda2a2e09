"""Core sync engine for executing sync operations."""

import logging
import time
from contextlib import nullcontext
from dataclasses import dataclass, field
from typing import Optional

from rich.progress import Progress, SpinnerColumn, TextColumn

from ..api import WebDavClient
from ..exceptions import DavSyncError
from ..output import OutputFormatter
from ..utils import join_remote_path
from .comparator import FileComparator, SyncAction, SyncPlan
from .operations import SyncOperations
from .pair import SyncPair
from .progress import SyncProgressTracker
from .scanner import DirectoryScanner, LocalFile, RemoteFile

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Outcome of one sync run.

    A run either succeeds or stops at exactly one error. Operations applied
    before the error stay applied.
    """

    stats: dict = field(default_factory=dict)
    """Counts of operations actually performed"""

    plan: Optional[SyncPlan] = None
    """The plan, if reconciliation got that far"""

    error: Optional[DavSyncError] = None
    """The error that ended the run, if any"""

    dry_run: bool = False

    @property
    def success(self) -> bool:
        """Whether the run finished without an error."""
        return self.error is None


class SyncEngine:
    """Core sync engine that mirrors a local tree onto a WebDAV server."""

    def __init__(
        self,
        client: WebDavClient,
        output: Optional[OutputFormatter] = None,
        tracker: Optional[SyncProgressTracker] = None,
        scan_spinner: bool = True,
    ):
        """Initialize sync engine.

        Args:
            client: WebDAV client
            output: Output formatter for displaying progress/status
            tracker: Optional progress tracker receiving structured events
            scan_spinner: Show a spinner while scanning (disable when the
                caller already runs a live progress display)
        """
        self.client = client
        self.scan_spinner = scan_spinner
        self.output = output or OutputFormatter()
        self.tracker = tracker or SyncProgressTracker()
        self.operations = SyncOperations(
            client, on_directory_created=self.tracker.directory_created
        )
        self.comparator = FileComparator()

    def sync_pair(self, pair: SyncPair, dry_run: bool = False) -> SyncResult:
        """Sync a single sync pair.

        Scans both sides, builds and validates the plan, then applies it
        unless this is a dry run.

        Args:
            pair: Sync pair to synchronize
            dry_run: If True, only show what would be done without
                touching the server

        Returns:
            SyncResult describing what was done and the error, if any

        Examples:
            >>> engine = SyncEngine(client)
            >>> result = engine.sync_pair(SyncPair(Path("./site"), "/www"))
            >>> if not result.success:
            ...     print(result.error.kind, result.error)
        """
        result = SyncResult(stats=self._create_empty_stats(), dry_run=dry_run)

        if not self.output.quiet:
            self.output.info(f"Syncing: {pair.local} -> {pair.remote}")
            if dry_run:
                self.output.info("Dry run: No changes will be made")
            self.output.print("")

        try:
            local_files, remote_files = self.scan(pair)
            result.plan = self.comparator.compare(local_files, remote_files)
            result.stats["skips"] = len(result.plan.unchanged)
            self._display_sync_plan(result.plan, dry_run)

            if not dry_run:
                self.execute(result.plan, pair, result.stats)
        except DavSyncError as e:
            logger.debug("Sync stopped by %s: %s", e.kind, e)
            result.error = e
            return result

        if not self.output.quiet:
            self._display_summary(result.stats, dry_run)
        return result

    def scan(self, pair: SyncPair) -> tuple[list[LocalFile], list[RemoteFile]]:
        """Build the local and remote inventories.

        Args:
            pair: Sync pair configuration

        Returns:
            Tuple of (local files, remote files)
        """
        scanner = DirectoryScanner(exclude_dot_files=pair.exclude_dot_files)

        show_spinner = (
            self.scan_spinner
            and not self.output.quiet
            and not self.output.json_output
        )
        progress_ctx = (
            Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                transient=True,
            )
            if show_spinner
            else nullcontext()
        )

        with progress_ctx as progress:
            scan_start = time.time()
            task = None
            if progress is not None:
                task = progress.add_task("Scanning local directory...", total=None)
            local_files = scanner.scan_local(pair.local)
            logger.debug(
                "Local scan took %.2fs for %d files",
                time.time() - scan_start,
                len(local_files),
            )
            self.tracker.scan_complete("local", len(local_files))

            scan_start = time.time()
            if progress is not None and task is not None:
                progress.update(task, description="Scanning remote directory...")
            remote_files = scanner.scan_remote(self.client, pair.remote)
            logger.debug(
                "Remote scan took %.2fs for %d files",
                time.time() - scan_start,
                len(remote_files),
            )
            self.tracker.scan_complete("remote", len(remote_files))

        return local_files, remote_files

    def execute(
        self, plan: SyncPlan, pair: SyncPair, stats: Optional[dict] = None
    ) -> dict:
        """Apply a validated plan to the server.

        Phases run in a fixed order: additions, then updates, then
        deletions. The first failing operation stops the run; operations
        already applied are not rolled back.

        Args:
            plan: Validated sync plan
            pair: Sync pair configuration
            stats: Statistics dictionary to update in place (optional)

        Returns:
            Statistics dictionary

        Raises:
            DavSyncError: The first error encountered
        """
        if stats is None:
            stats = self._create_empty_stats()

        self.operations.reset()
        total = len(plan.to_add) + len(plan.to_update) + len(plan.to_delete)
        self.tracker.plan_ready(total)

        stats["directories_created"] += self.operations.ensure_directory(pair.remote)
        self._execute_additions(plan.to_add, pair, stats)
        self._execute_updates(plan.to_update, pair, stats)
        self._execute_deletions(plan.to_delete, stats)

        logger.debug(
            "Executed plan: %d added, %d updated, %d deleted, %d dirs created",
            stats["adds"],
            stats["updates"],
            stats["deletes"],
            stats["directories_created"],
        )
        return stats

    def _execute_additions(
        self, files: list[LocalFile], pair: SyncPair, stats: dict
    ) -> None:
        self._start_phase(SyncAction.ADD, len(files), "Writing {n} new file(s)...")
        for local_file in files:
            self.output.info(local_file.relative_path)
            remote_path = join_remote_path(pair.remote, local_file.relative_path)
            stats["directories_created"] += self.operations.ensure_parents(
                remote_path
            )
            self.operations.upload_file(local_file, remote_path, overwrite=False)
            stats["adds"] += 1
            self.tracker.file_complete(local_file.relative_path)
        self._finish_phase()

    def _execute_updates(
        self, files: list[LocalFile], pair: SyncPair, stats: dict
    ) -> None:
        self._start_phase(
            SyncAction.UPDATE, len(files), "Updating {n} existing file(s)..."
        )
        for local_file in files:
            self.output.info(local_file.relative_path)
            remote_path = join_remote_path(pair.remote, local_file.relative_path)
            self.operations.upload_file(local_file, remote_path, overwrite=True)
            stats["updates"] += 1
            self.tracker.file_complete(local_file.relative_path)
        self._finish_phase()

    def _execute_deletions(self, files: list[RemoteFile], stats: dict) -> None:
        self._start_phase(SyncAction.DELETE, len(files), "Deleting {n} file(s)...")
        for remote_file in files:
            self.output.info(remote_file.relative_path)
            self.operations.delete_remote(remote_file)
            stats["deletes"] += 1
            self.tracker.file_complete(remote_file.relative_path)
        self._finish_phase()

    def _start_phase(self, action: SyncAction, count: int, message: str) -> None:
        logger.debug("Starting %s phase with %d file(s)", action.value, count)
        self.output.info(message.format(n=count))
        self.tracker.phase_start(action.value, count)

    def _finish_phase(self) -> None:
        self.tracker.phase_complete()
        self.output.print("")

    def _create_empty_stats(self) -> dict:
        """Create an empty statistics dictionary.

        Returns:
            Dictionary with zero counts for all stat categories
        """
        return {
            "adds": 0,
            "updates": 0,
            "deletes": 0,
            "skips": 0,
            "directories_created": 0,
        }

    def _display_sync_plan(self, plan: SyncPlan, dry_run: bool) -> None:
        """Display sync plan to user.

        Args:
            plan: Sync plan
            dry_run: Whether this is a dry run
        """
        if self.output.quiet:
            return

        counts = plan.counts()
        self.output.info("Sync plan:")
        if counts["adds"] > 0:
            self.output.info(f"  + Add: {counts['adds']} file(s)")
        if counts["updates"] > 0:
            self.output.info(f"  ↑ Update: {counts['updates']} file(s)")
        if counts["deletes"] > 0:
            self.output.info(f"  ✗ Delete: {counts['deletes']} file(s)")
        if counts["skips"] > 0:
            self.output.info(f"  = Unchanged: {counts['skips']} file(s)")

        if dry_run:
            for action, marker in (
                (SyncAction.ADD, "+"),
                (SyncAction.UPDATE, "↑"),
                (SyncAction.DELETE, "✗"),
            ):
                for path in plan.paths(action):
                    self.output.info(f"  {marker} {path}")

        self.output.print("")

    def _display_summary(self, stats: dict, dry_run: bool) -> None:
        """Display sync summary.

        Args:
            stats: Statistics dictionary
            dry_run: Whether this was a dry run
        """
        if dry_run:
            self.output.success("Dry run complete!")
            return

        self.output.success("Sync complete!")

        total_actions = stats["adds"] + stats["updates"] + stats["deletes"]
        if total_actions > 0:
            self.output.info(f"Total actions: {total_actions}")
            if stats["adds"] > 0:
                self.output.info(f"  Added: {stats['adds']}")
            if stats["updates"] > 0:
                self.output.info(f"  Updated: {stats['updates']}")
            if stats["deletes"] > 0:
                self.output.info(f"  Deleted: {stats['deletes']}")
        else:
            self.output.info("No changes needed - everything is in sync!")
