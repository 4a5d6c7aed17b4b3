# blobsync Remote Store
# Capability interface consumed by the sync engine

import threading
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

ARCHIVE_TIER = "archive"


class StoreError(Exception):
    """Base class for remote store failures."""


class ContainerNotFoundError(StoreError):
    """The container does not exist or cannot be accessed."""


class ListingError(StoreError):
    """Enumerating the container failed; the remote inventory is incomplete."""


class DownloadCancelled(StoreError):
    """A transfer was stopped because cancellation was requested."""


@dataclass(frozen=True)
class RemoteObject:
    """One object as reported by the remote store listing."""

    name: str
    length: Optional[int] = None
    content_md5: Optional[bytes] = None
    tier: Optional[str] = None

    @property
    def is_archived(self) -> bool:
        """Check if the object sits in the archive (cold) tier."""
        return self.tier is not None and str(self.tier).lower() == ARCHIVE_TIER


class RemoteStore(Protocol):
    """Operations the sync engine needs from a remote object store."""

    @property
    def container(self) -> str: ...

    def ensure_container(self) -> None:
        """Raise ContainerNotFoundError unless the container is reachable."""
        ...

    def list_objects(self) -> Iterator[RemoteObject]:
        """Yield every object in the container, paging as needed."""
        ...

    def download(
        self,
        name: str,
        destination: Path,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        """Write the content of object ``name`` to ``destination``."""
        ...
