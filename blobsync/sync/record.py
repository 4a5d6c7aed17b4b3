# blobsync File Record
# Value type shared by the remote and local inventories

from dataclasses import dataclass
from typing import Optional

RecordKey = tuple[str, Optional[int], str]


@dataclass(frozen=True)
class FileRecord:
    """
    One file, either a remote object or a local file.

    Equivalence between records is defined by ``record_key`` and
    ``records_equivalent``, not by ``==``.
    """

    name: str
    length: Optional[int] = None
    content_hash: str = ""
    is_cold_tier: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("FileRecord name must not be empty")

    @property
    def has_hash(self) -> bool:
        """Check if a content hash was computed."""
        return bool(self.content_hash)


def record_key(record: FileRecord) -> RecordKey:
    """
    Build the set-membership key for a record.

    Args:
        record: Record to key.

    Returns:
        Tuple of lower-cased name, length and content hash.
    """
    return (record.name.lower(), record.length, record.content_hash)


def records_equivalent(a: FileRecord, b: FileRecord) -> bool:
    """
    Check whether two records describe the same file.

    Names compare case-insensitively, lengths exactly (two missing lengths
    match) and hashes byte-for-byte.
    """
    return record_key(a) == record_key(b)
