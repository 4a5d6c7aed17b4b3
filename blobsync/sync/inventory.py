# blobsync Inventory Collector
# Remote listing and local directory scan

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from blobsync.store.base import ListingError, RemoteObject, RemoteStore
from blobsync.sync.record import FileRecord
from blobsync.utils.hashing import encode_digest, file_hash
from blobsync.utils.paths import ensure_dir, is_temp_file


def remote_record(obj: RemoteObject, *, compare_hash: bool) -> FileRecord:
    """Convert a listed remote object into a FileRecord."""
    content_hash = ""
    if compare_hash and obj.content_md5:
        content_hash = encode_digest(obj.content_md5)

    return FileRecord(
        name=obj.name,
        length=obj.length,
        content_hash=content_hash,
        is_cold_tier=obj.is_archived,
    )


def list_remote_records(store: RemoteStore, *, compare_hash: bool) -> list[FileRecord]:
    """
    Collect the full remote inventory.

    Args:
        store: Remote store to enumerate.
        compare_hash: Attach the reported MD5 to each record.

    Returns:
        List of remote records in listing order.

    Raises:
        ListingError: If enumeration fails at any page.
    """
    try:
        return [remote_record(obj, compare_hash=compare_hash) for obj in store.list_objects()]
    except ListingError:
        raise
    except Exception as e:
        raise ListingError(f"Failed to list container '{store.container}': {e}") from e


def local_record(path: Path, *, compare_hash: bool) -> Optional[FileRecord]:
    """
    Build a record for one local file.

    Returns:
        FileRecord, or None if the file vanished while being read.
    """
    try:
        length = path.stat().st_size
        content_hash = file_hash(path) if compare_hash else ""
    except FileNotFoundError:
        return None

    return FileRecord(name=path.name, length=length, content_hash=content_hash)


def scan_local_records(directory: Path, *, compare_hash: bool, workers: int = 4) -> list[FileRecord]:
    """
    Collect records for the files directly inside directory.

    Subdirectories are not descended into and partial download files are
    ignored. A missing directory is created and yields no records.

    Args:
        directory: Local sync directory.
        compare_hash: Compute an MD5 for each file.
        workers: Threads used for hashing.

    Returns:
        Records sorted by name.
    """
    if not directory.exists():
        ensure_dir(directory)
        return []

    # Leftover downloads from an interrupted run are not inventory
    paths = [p for p in directory.iterdir() if p.is_file() and not is_temp_file(p)]

    if compare_hash and workers > 1 and len(paths) > 1:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="blobsync-scan") as executor:
            results = list(executor.map(lambda p: local_record(p, compare_hash=True), paths))
    else:
        results = [local_record(p, compare_hash=compare_hash) for p in paths]

    records = [r for r in results if r is not None]
    records.sort(key=lambda r: r.name)
    return records
