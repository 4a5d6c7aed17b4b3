# blobsync Test Fixtures
# Pytest fixtures and in-memory doubles for blobsync tests

import hashlib
import tempfile
import threading
import time
from collections.abc import Generator
from contextlib import nullcontext
from pathlib import Path
from typing import Optional

import pytest

from blobsync.config.schema import SyncOptions
from blobsync.store.base import ContainerNotFoundError, DownloadCancelled, RemoteObject

CONNECTION_STRING = "DefaultEndpointsProtocol=https;AccountName=devaccount;AccountKey=c2VjcmV0;EndpointSuffix=core.windows.net"


class FakeStore:
    """In-memory RemoteStore that tracks concurrent downloads."""

    def __init__(
        self,
        objects: Optional[dict[str, bytes]] = None,
        *,
        container: str = "test-container",
        archived: Optional[set[str]] = None,
        with_md5: bool = True,
        exists: bool = True,
        delay: float = 0.0,
        failing: Optional[set[str]] = None,
        list_error: Optional[Exception] = None,
    ):
        self.objects = dict(objects or {})
        self._container = container
        self.archived = set(archived or ())
        self.with_md5 = with_md5
        self.exists = exists
        self.delay = delay
        self.failing = set(failing or ())
        self.list_error = list_error
        self.downloaded: list[str] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    @property
    def container(self) -> str:
        return self._container

    def ensure_container(self) -> None:
        if not self.exists:
            raise ContainerNotFoundError(f"Container '{self._container}' does not exist or is not accessible.")

    def list_objects(self):
        for index, (name, data) in enumerate(self.objects.items()):
            # Fail on the second page so a partial listing was already produced
            if self.list_error is not None and index == 1:
                raise self.list_error
            yield RemoteObject(
                name=name,
                length=len(data),
                content_md5=hashlib.md5(data).digest() if self.with_md5 else None,
                tier="Archive" if name in self.archived else "Hot",
            )

    def download(self, name: str, destination: Path, *, cancel_event=None) -> None:
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            if cancel_event is not None and cancel_event.is_set():
                raise DownloadCancelled(f"Download of '{name}' cancelled")
            if name in self.failing:
                raise OSError(f"simulated transfer failure for {name}")
            destination.write_bytes(self.objects[name])
            with self._lock:
                self.downloaded.append(name)
        finally:
            with self._lock:
                self.active -= 1


class RecordingOperator:
    """Operator double that records output and answers prompts from queues."""

    def __init__(self, *, confirms: Optional[list[bool]] = None, keys: Optional[list[str]] = None):
        self.confirms = list(confirms or [])
        self.keys = list(keys or [])
        self.messages: list[tuple[str, str]] = []
        self.prompts: list[str] = []
        self.asked: list[str] = []
        self.answers: list[str] = []
        self.file_tables: list[list] = []
        self.parameters: list[dict[str, str]] = []
        self.exceptions: list[BaseException] = []
        self._lock = threading.Lock()

    def _add(self, level: str, message: str) -> None:
        with self._lock:
            self.messages.append((level, message))

    def info(self, message: str) -> None:
        self._add("info", message)

    def success(self, message: str) -> None:
        self._add("success", message)

    def warning(self, message: str) -> None:
        self._add("warning", message)

    def error(self, message: str) -> None:
        self._add("error", message)

    def exception(self, exc: BaseException) -> None:
        self.exceptions.append(exc)
        self._add("error", str(exc))

    def confirm(self, prompt: str, default: bool = True) -> bool:
        self.prompts.append(prompt)
        return self.confirms.pop(0) if self.confirms else True

    def ask(self, prompt: str) -> str:
        self.asked.append(prompt)
        return self.answers.pop(0) if self.answers else ""

    def read_key(self) -> str:
        return self.keys.pop(0) if self.keys else ""

    def show_parameters(self, title: str, params: dict[str, str]) -> None:
        self.parameters.append(params)

    def show_file_table(self, records) -> None:
        self.file_tables.append(list(records))

    def status(self, message: str):
        self._add("status", message)
        return nullcontext()

    def texts(self, level: str) -> list[str]:
        return [message for lvl, message in self.messages if lvl == level]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.delenv("BLOBSYNC_CONFIG", raising=False)
    monkeypatch.delenv("AZURE_STORAGE_CONNECTION_STRING", raising=False)
    return home


@pytest.fixture
def local_root(temp_dir: Path) -> Path:
    """Local sync directory."""
    root = temp_dir / "local"
    root.mkdir()
    return root


@pytest.fixture
def store_factory():
    """Factory for in-memory remote stores."""
    return FakeStore


@pytest.fixture
def operator() -> RecordingOperator:
    """Operator that approves everything."""
    return RecordingOperator()


@pytest.fixture
def operator_factory():
    """Factory for operators with scripted answers."""
    return RecordingOperator


@pytest.fixture
def make_options(local_root: Path):
    """Build SyncOptions with test defaults."""

    def _make(**overrides) -> SyncOptions:
        values = {
            "connection_string": CONNECTION_STRING,
            "container": "test-container",
            "path": local_root,
            "threads": 4,
            "silence": True,
            "keep_old": False,
            "compare_hash": False,
        }
        values.update(overrides)
        return SyncOptions(**values)

    return _make
