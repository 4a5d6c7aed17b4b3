# blobsync Diff Engine
# Set differences between remote and local inventories

from collections.abc import Iterable
from dataclasses import dataclass, field

from blobsync.sync.record import FileRecord, record_key


@dataclass
class DiffResult:
    """Outcome of comparing the two inventories."""

    to_download: list[FileRecord] = field(default_factory=list)
    redundant: list[FileRecord] = field(default_factory=list)
    # Redundant records whose name is gone from the remote listing
    to_delete: list[FileRecord] = field(default_factory=list)

    @property
    def is_in_sync(self) -> bool:
        """Check if nothing needs to be downloaded or removed."""
        return not self.to_download and not self.redundant


def difference(left: Iterable[FileRecord], right: Iterable[FileRecord]) -> list[FileRecord]:
    """
    Records of ``left`` with no equivalent in ``right``, in ``left`` order.
    """
    right_keys = {record_key(r) for r in right}
    return [r for r in left if record_key(r) not in right_keys]


def missing_remotely(redundant: Iterable[FileRecord], remote: Iterable[FileRecord]) -> list[FileRecord]:
    """
    Redundant local records that have no remote object of the same name.

    A stale local copy of a remote object is replaced by its download
    instead of being deleted.
    """
    remote_names = {r.name.lower() for r in remote}
    return [r for r in redundant if r.name.lower() not in remote_names]


def compute_diff(remote: list[FileRecord], local: list[FileRecord]) -> DiffResult:
    """
    Compute what to download and what is redundant locally.

    Args:
        remote: Records from the remote listing.
        local: Records from the local scan.

    Returns:
        DiffResult with ``remote - local``, ``local - remote`` and the
        part of ``local - remote`` that may be deleted.
    """
    redundant = difference(local, remote)
    return DiffResult(
        to_download=difference(remote, local),
        redundant=redundant,
        to_delete=missing_remotely(redundant, remote),
    )
