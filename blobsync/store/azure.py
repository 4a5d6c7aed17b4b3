# blobsync Azure Blob Store
# RemoteStore implementation on top of azure-storage-blob

import threading
from collections.abc import Iterator
from pathlib import Path
from typing import Any, Optional

from azure.core.exceptions import AzureError
from azure.storage.blob import ContainerClient

from blobsync.store.base import ContainerNotFoundError, DownloadCancelled, RemoteObject


def _to_remote_object(blob: Any) -> RemoteObject:
    """Convert azure BlobProperties into a RemoteObject."""
    content_settings = getattr(blob, "content_settings", None)
    content_md5 = getattr(content_settings, "content_md5", None) if content_settings else None
    tier = getattr(blob, "blob_tier", None)

    return RemoteObject(
        name=blob.name,
        length=getattr(blob, "size", None),
        content_md5=bytes(content_md5) if content_md5 else None,
        tier=str(tier.value if hasattr(tier, "value") else tier) if tier is not None else None,
    )


class AzureBlobStore:
    """
    Azure Blob Storage container.

    A single ContainerClient is shared by all download threads; the SDK
    client is safe for concurrent use.
    """

    def __init__(
        self,
        connection_string: str,
        container: str,
        *,
        client: Optional[ContainerClient] = None,
        max_concurrency: int = 1,
    ):
        """
        Initialize store.

        Args:
            connection_string: Storage account connection string.
            container: Blob container name.
            client: Optional pre-built ContainerClient (used by tests).
            max_concurrency: Parallel range requests per single blob download.
        """
        self._container = container
        self._client = client or ContainerClient.from_connection_string(connection_string, container)
        self._max_concurrency = max_concurrency

    @property
    def container(self) -> str:
        """Container name."""
        return self._container

    def ensure_container(self) -> None:
        """
        Fail fast on a missing or inaccessible container.

        Raises:
            ContainerNotFoundError: If the container cannot be reached.
        """
        try:
            exists = self._client.exists()
        except AzureError as e:
            raise ContainerNotFoundError(
                f"Container '{self._container}' does not exist or is not accessible: {e}"
            ) from e

        if not exists:
            raise ContainerNotFoundError(f"Container '{self._container}' does not exist or is not accessible.")

    def list_objects(self) -> Iterator[RemoteObject]:
        """Yield all blobs in the container; the SDK pages transparently."""
        for blob in self._client.list_blobs():
            yield _to_remote_object(blob)

    def download(
        self,
        name: str,
        destination: Path,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        """
        Stream a blob to a local file chunk by chunk.

        Args:
            name: Blob name.
            destination: File to write (truncated first).
            cancel_event: Checked between chunks.

        Raises:
            DownloadCancelled: If cancel_event was set mid-transfer.
        """
        downloader = self._client.download_blob(name, max_concurrency=self._max_concurrency)

        with open(destination, "wb") as f:
            for chunk in downloader.chunks():
                if cancel_event is not None and cancel_event.is_set():
                    raise DownloadCancelled(f"Download of '{name}' cancelled")
                f.write(chunk)
