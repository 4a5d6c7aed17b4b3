# blobsync Download Scheduler
# Bounded-concurrency downloads with archive-tier and keep-old handling

from __future__ import annotations

import os
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from blobsync.store.base import DownloadCancelled, RemoteStore
from blobsync.sync.record import FileRecord
from blobsync.utils.paths import preserve_existing, resolve_destination, temp_path_for

if TYPE_CHECKING:
    from blobsync.output.operator import Operator


@dataclass
class DownloadStats:
    """
    Outcome counters for one scheduler run.

    Download threads update the counters concurrently; every mutation goes
    through the lock.
    """

    scheduled: int = 0
    succeeded: int = 0
    not_downloaded: int = 0
    archived_skipped: int = 0
    cancelled: int = 0
    failures: list[tuple[str, str]] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def downloaded(self) -> int:
        """Number of scheduled records that ended up on disk."""
        return self.scheduled - self.not_downloaded

    @property
    def failed(self) -> int:
        """Number of downloads that raised an error."""
        return len(self.failures)

    def record_success(self) -> None:
        with self._lock:
            self.succeeded += 1

    def record_archived(self) -> None:
        with self._lock:
            self.archived_skipped += 1
            self.not_downloaded += 1

    def record_cancelled(self) -> None:
        with self._lock:
            self.cancelled += 1
            self.not_downloaded += 1

    def record_failure(self, name: str, message: str) -> None:
        with self._lock:
            self.not_downloaded += 1
            self.failures.append((name, message))


class DownloadScheduler:
    """
    Downloads a list of records into a local directory.

    At most ``threads`` transfers run at the same time. Archive-tier
    records are skipped, failures are isolated per record.
    """

    def __init__(
        self,
        store: RemoteStore,
        local_root: Path,
        *,
        threads: int,
        keep_old: bool,
        operator: Operator,
        cancel_event: threading.Event | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize scheduler.

        Args:
            store: Remote store to download from.
            local_root: Local sync directory.
            threads: Maximum number of concurrent downloads (>= 1).
            keep_old: Preserve existing files under a timestamped name.
            operator: Operator used for per-file notices.
            cancel_event: Optional event that stops outstanding work.
            clock: Source of the timestamp for preserved files.
        """
        if threads < 1:
            raise ValueError(f"threads must be at least 1, got {threads}")

        self.store = store
        self.local_root = local_root
        self.threads = threads
        self.keep_old = keep_old
        self.operator = operator
        self.cancel_event = cancel_event or threading.Event()
        self.clock = clock
        self.stats = DownloadStats()

    def run(self, records: list[FileRecord]) -> DownloadStats:
        """
        Download all records and wait for every task to finish.

        Args:
            records: Records missing locally.

        Returns:
            DownloadStats for this run.
        """
        self.stats.scheduled += len(records)

        pending: list[FileRecord] = []
        for record in records:
            if record.is_cold_tier:
                self.stats.record_archived()
                self.operator.warning(f"Skipped archived file '{record.name}'.")
            else:
                pending.append(record)

        if not pending:
            return self.stats

        with ThreadPoolExecutor(max_workers=self.threads, thread_name_prefix="blobsync-download") as executor:
            futures = {executor.submit(self._run_one, record): record for record in pending}
            try:
                for future in as_completed(futures):
                    future.result()
            except KeyboardInterrupt:
                # Queued tasks skip themselves, running transfers stop at the next chunk
                self.cancel_event.set()
                raise

        return self.stats

    def _run_one(self, record: FileRecord) -> None:
        """Download one record, recording the outcome."""
        if self.cancel_event.is_set():
            self.stats.record_cancelled()
            return

        try:
            self.download_one(record)
        except DownloadCancelled:
            self.stats.record_cancelled()
            self.operator.warning(f"Cancelled download of {record.name}.")
        except Exception as e:
            self.stats.record_failure(record.name, str(e))
            self.operator.error(f"Failed to download {record.name}: {e}")
        else:
            self.stats.record_success()
            self.operator.info(f"[{self.clock():%H:%M:%S}] Downloaded {record.name}.")

    def download_one(self, record: FileRecord) -> Path:
        """
        Transfer one object and move it into place.

        The content is written to a temporary file next to the destination
        first, so the destination is never left half-written.

        Args:
            record: Remote record to fetch.

        Returns:
            Final destination path.
        """
        dest = resolve_destination(self.local_root, record.name)
        temp = temp_path_for(dest)

        try:
            self.store.download(record.name, temp, cancel_event=self.cancel_event)

            if self.keep_old:
                preserve_existing(dest, self.clock())

            os.replace(temp, dest)
        except BaseException:
            temp.unlink(missing_ok=True)
            raise

        return dest
