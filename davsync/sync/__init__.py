"""Sync engine for davsync - one-way local to WebDAV mirroring."""

from .comparator import FileComparator, SyncAction, SyncPlan
from .engine import SyncEngine, SyncResult
from .operations import SyncOperations
from .pair import SyncPair
from .progress import SyncProgressEvent, SyncProgressInfo, SyncProgressTracker
from .scanner import DirectoryScanner, LocalFile, RemoteFile

__all__ = [
    "SyncEngine",
    "SyncResult",
    "SyncPair",
    "SyncOperations",
    "DirectoryScanner",
    "FileComparator",
    "SyncAction",
    "SyncPlan",
    "LocalFile",
    "RemoteFile",
    "SyncProgressEvent",
    "SyncProgressInfo",
    "SyncProgressTracker",
]
