"""blobsync - one-way Azure Blob Storage to local folder synchronization.

Lists a blob container and a local folder, downloads what is missing or
stale locally with a bounded number of threads, and optionally removes
local files that no longer exist in the container.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "FileRecord",
    "SyncEngine",
    "SyncResult",
    "SyncOptions",
    "compute_diff",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name == "SyncOptions":
        from blobsync.config.schema import SyncOptions

        return SyncOptions
    if name in ("FileRecord", "SyncEngine", "SyncResult", "compute_diff"):
        from blobsync import sync

        return getattr(sync, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
