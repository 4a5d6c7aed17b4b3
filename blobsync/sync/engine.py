# blobsync Sync Engine
# Run orchestration: inventories, diff, downloads, cleanup, summary

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from blobsync.config.schema import SyncOptions
from blobsync.store.base import RemoteStore
from blobsync.sync.cleanup import CleanupCoordinator, CleanupResult
from blobsync.sync.diff import DiffResult, compute_diff
from blobsync.sync.download import DownloadScheduler, DownloadStats
from blobsync.sync.inventory import list_remote_records, scan_local_records

if TYPE_CHECKING:
    from blobsync.output.operator import Operator

APP_TITLE = "blobsync"


@dataclass
class SyncResult:
    """Result of a complete sync run."""

    success: bool = True
    remote_count: int = 0
    local_count: int = 0
    to_download: int = 0
    redundant: int = 0
    downloaded: int = 0
    deleted: int = 0
    archived_skipped: int = 0
    failed: int = 0
    aborted: bool = False
    cancelled: bool = False
    error: Optional[str] = None

    @property
    def exit_code(self) -> int:
        """Process exit status for this result."""
        return 0 if self.success else 1


class SyncEngine:
    """
    One-way sync of a remote container into a local directory.

    Coordinates inventory collection, diffing, the download scheduler and
    the cleanup coordinator for a single run.
    """

    def __init__(
        self,
        options: SyncOptions,
        store: RemoteStore,
        operator: Operator,
        *,
        cancel_event: Optional[threading.Event] = None,
    ):
        """
        Initialize sync engine.

        Args:
            options: Validated run options.
            store: Remote store for the configured container.
            operator: Prompts and notices.
            cancel_event: Optional event that stops outstanding downloads.
        """
        self.options = options
        self.store = store
        self.operator = operator
        self.cancel_event = cancel_event or threading.Event()

    def run(self) -> SyncResult:
        """
        Execute the full sync sequence.

        Any exception is reported once and turned into a failed result.

        Returns:
            SyncResult with the final tallies.
        """
        result = SyncResult()
        try:
            self._run(result)
        except Exception as e:
            self.operator.exception(e)
            result.success = False
            result.error = str(e)
        return result

    def _run(self, result: SyncResult) -> None:
        options = self.options

        self.operator.show_parameters(APP_TITLE, options.parameter_table())
        if not options.silence and not self.operator.confirm("Good to go?"):
            result.aborted = True
            return

        self.store.ensure_container()

        with self.operator.status("Finding files on Azure Storage..."):
            remote = list_remote_records(self.store, compare_hash=options.compare_hash)
        result.remote_count = len(remote)
        self.operator.info(f"{len(remote)} cloud file(s) found.")

        local = scan_local_records(options.path, compare_hash=options.compare_hash)
        result.local_count = len(local)
        self.operator.info(f"{len(local)} local file(s) found.")

        diff = compute_diff(remote, local)
        result.to_download = len(diff.to_download)
        result.redundant = len(diff.to_delete)

        if diff.is_in_sync:
            self.operator.success("Local files are in sync with the container.")
            return

        stats = self._download(diff)
        if stats is not None:
            result.downloaded = stats.downloaded
            result.archived_skipped = stats.archived_skipped
            result.failed = stats.failed
            result.cancelled = stats.cancelled > 0

        if self.cancel_event.is_set():
            result.cancelled = True
            return

        cleanup = self._cleanup(diff)
        result.deleted = cleanup.deleted
        result.failed += len(cleanup.failures)

    def _download(self, diff: DiffResult) -> Optional[DownloadStats]:
        """Confirm and run the download phase; None if nothing was scheduled."""
        if not diff.to_download:
            self.operator.info("No new files need to be downloaded.")
            return None

        count = len(diff.to_download)
        if not self.options.silence and not self.operator.confirm(f"{count} new file(s) to download. Continue?"):
            return None

        scheduler = DownloadScheduler(
            self.store,
            self.options.path,
            threads=self.options.threads,
            keep_old=self.options.keep_old,
            operator=self.operator,
            cancel_event=self.cancel_event,
        )
        return scheduler.run(diff.to_download)

    def _cleanup(self, diff: DiffResult) -> CleanupResult:
        coordinator = CleanupCoordinator(
            self.options.path,
            silence=self.options.silence,
            keep_old=self.options.keep_old,
            operator=self.operator,
        )
        return coordinator.run(diff.to_delete)
