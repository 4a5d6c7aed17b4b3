# blobsync Store Module
# Remote object store capability and Azure implementation

from blobsync.store.base import (
    ARCHIVE_TIER,
    ContainerNotFoundError,
    DownloadCancelled,
    ListingError,
    RemoteObject,
    RemoteStore,
    StoreError,
)

__all__ = [
    "ARCHIVE_TIER",
    "RemoteObject",
    "RemoteStore",
    "StoreError",
    "ContainerNotFoundError",
    "ListingError",
    "DownloadCancelled",
    "AzureBlobStore",
]


def __getattr__(name: str):
    """Lazy import so the Azure SDK is only loaded when needed."""
    if name == "AzureBlobStore":
        from blobsync.store.azure import AzureBlobStore

        return AzureBlobStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
