# blobsync Utilities Module
# Helper functions for path handling and content hashing

from blobsync.utils.hashing import (
    content_hash,
    encode_digest,
    file_hash,
)
from blobsync.utils.paths import (
    ensure_dir,
    expand_path,
    is_temp_file,
    preserve_existing,
    resolve_destination,
    safe_delete,
    split_object_name,
    temp_path_for,
    timestamped_name,
)

__all__ = [
    # Paths
    "expand_path",
    "ensure_dir",
    "split_object_name",
    "resolve_destination",
    "timestamped_name",
    "preserve_existing",
    "temp_path_for",
    "is_temp_file",
    "safe_delete",
    # Hashing
    "content_hash",
    "encode_digest",
    "file_hash",
]
