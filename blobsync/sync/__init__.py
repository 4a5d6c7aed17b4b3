# blobsync Sync Module
# Core synchronization engine and components

from blobsync.sync.cleanup import CleanupCoordinator, CleanupResult
from blobsync.sync.diff import DiffResult, compute_diff, missing_remotely
from blobsync.sync.download import DownloadScheduler, DownloadStats
from blobsync.sync.engine import SyncEngine, SyncResult
from blobsync.sync.inventory import list_remote_records, scan_local_records
from blobsync.sync.record import FileRecord, record_key, records_equivalent

__all__ = [
    # Record
    "FileRecord",
    "record_key",
    "records_equivalent",
    # Diff
    "DiffResult",
    "compute_diff",
    "missing_remotely",
    # Inventory
    "list_remote_records",
    "scan_local_records",
    # Download
    "DownloadScheduler",
    "DownloadStats",
    # Cleanup
    "CleanupCoordinator",
    "CleanupResult",
    # Engine
    "SyncEngine",
    "SyncResult",
]
