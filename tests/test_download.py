# Tests for blobsync.sync.download
# Bounded-concurrency download scheduler

import threading
from datetime import datetime
from pathlib import Path

import pytest

from blobsync.sync.download import DownloadScheduler, DownloadStats
from blobsync.sync.record import FileRecord

NOW = datetime(2024, 1, 2, 3, 4, 5)


def _records(store) -> list[FileRecord]:
    return [
        FileRecord(name=name, length=len(data), is_cold_tier=name in store.archived)
        for name, data in store.objects.items()
    ]


def _scheduler(store, root: Path, operator, **kwargs) -> DownloadScheduler:
    kwargs.setdefault("threads", 4)
    kwargs.setdefault("keep_old", False)
    return DownloadScheduler(store, root, operator=operator, clock=lambda: NOW, **kwargs)


class TestDownloadStats:
    """Tests for DownloadStats."""

    def test_downloaded(self):
        stats = DownloadStats(scheduled=5)
        stats.record_archived()
        stats.record_failure("x", "boom")
        assert stats.downloaded == 3
        assert stats.failed == 1
        assert stats.archived_skipped == 1
        assert stats.not_downloaded == 2

    def test_concurrent_increments(self):
        stats = DownloadStats()

        def work():
            for _ in range(1000):
                stats.record_success()
                stats.record_cancelled()

        threads = [threading.Thread(target=work) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert stats.succeeded == 8000
        assert stats.not_downloaded == 8000

    def test_instances_are_independent(self):
        a, b = DownloadStats(), DownloadStats()
        a.record_archived()
        assert b.archived_skipped == 0


class TestDownloadScheduler:
    """Tests for DownloadScheduler."""

    def test_invalid_threads(self, store_factory, local_root, operator):
        with pytest.raises(ValueError):
            DownloadScheduler(store_factory(), local_root, threads=0, keep_old=False, operator=operator)

    def test_downloads_all(self, store_factory, local_root, operator):
        store = store_factory({"a.txt": b"aaa", "b.txt": b"bbbb"})

        stats = _scheduler(store, local_root, operator).run(_records(store))

        assert stats.downloaded == 2
        assert stats.succeeded == 2
        assert (local_root / "a.txt").read_bytes() == b"aaa"
        assert (local_root / "b.txt").read_bytes() == b"bbbb"
        assert len(operator.texts("info")) == 2

    def test_nested_names_create_directories(self, store_factory, local_root, operator):
        store = store_factory({"2024/03/report.csv": b"1,2"})

        _scheduler(store, local_root, operator).run(_records(store))

        assert (local_root / "2024" / "03" / "report.csv").read_bytes() == b"1,2"

    def test_concurrency_bound(self, store_factory, local_root, operator):
        store = store_factory({f"f{i}.bin": b"x" for i in range(10)}, delay=0.05)

        stats = _scheduler(store, local_root, operator, threads=2).run(_records(store))

        assert stats.downloaded == 10
        assert store.max_active <= 2
        assert store.max_active == 2

    def test_single_thread_is_sequential(self, store_factory, local_root, operator):
        store = store_factory({f"f{i}.bin": b"x" for i in range(4)}, delay=0.01)
        _scheduler(store, local_root, operator, threads=1).run(_records(store))
        assert store.max_active == 1

    def test_archived_never_attempted(self, store_factory, local_root, operator):
        store = store_factory({"a.txt": b"a", "cold.txt": b"c"}, archived={"cold.txt"})

        stats = _scheduler(store, local_root, operator).run(_records(store))

        assert store.downloaded == ["a.txt"]
        assert stats.archived_skipped == 1
        assert stats.not_downloaded == 1
        assert stats.failed == 0
        assert stats.downloaded == 1
        assert not (local_root / "cold.txt").exists()
        assert any("cold.txt" in m for m in operator.texts("warning"))

    def test_failure_is_isolated(self, store_factory, local_root, operator):
        store = store_factory({f"f{i}.txt": b"ok" for i in range(5)}, failing={"f2.txt"})

        stats = _scheduler(store, local_root, operator).run(_records(store))

        assert stats.downloaded == 4
        assert stats.failures == [("f2.txt", "simulated transfer failure for f2.txt")]
        assert not (local_root / "f2.txt").exists()
        assert any("f2.txt" in m for m in operator.texts("error"))

    def test_failed_download_leaves_no_temp_files(self, store_factory, local_root, operator):
        store = store_factory({"bad.txt": b"x"}, failing={"bad.txt"})

        _scheduler(store, local_root, operator).run(_records(store))

        assert list(local_root.iterdir()) == []

    def test_unsafe_name_counts_as_failure(self, store_factory, local_root, operator):
        store = store_factory({"../escape.txt": b"x", "ok.txt": b"y"})

        stats = _scheduler(store, local_root, operator).run(_records(store))

        assert stats.failed == 1
        assert stats.downloaded == 1
        assert not (local_root.parent / "escape.txt").exists()

    def test_overwrite_without_keep_old(self, store_factory, local_root, operator):
        (local_root / "a.txt").write_bytes(b"old content")
        store = store_factory({"a.txt": b"new"})

        _scheduler(store, local_root, operator).run(_records(store))

        assert (local_root / "a.txt").read_bytes() == b"new"
        assert sorted(p.name for p in local_root.iterdir()) == ["a.txt"]

    def test_keep_old_preserves_previous_content(self, store_factory, local_root, operator):
        (local_root / "a.txt").write_bytes(b"old content")
        store = store_factory({"a.txt": b"new"})

        _scheduler(store, local_root, operator, keep_old=True).run(_records(store))

        assert (local_root / "a.txt").read_bytes() == b"new"
        assert (local_root / "a_20240102_030405.txt").read_bytes() == b"old content"
        assert sorted(p.name for p in local_root.iterdir()) == ["a.txt", "a_20240102_030405.txt"]

    def test_keep_old_in_subdirectory(self, store_factory, local_root, operator):
        (local_root / "sub").mkdir()
        (local_root / "sub" / "a.txt").write_bytes(b"old")
        store = store_factory({"sub/a.txt": b"new"})

        _scheduler(store, local_root, operator, keep_old=True).run(_records(store))

        assert (local_root / "sub" / "a_20240102_030405.txt").read_bytes() == b"old"
        assert (local_root / "sub" / "a.txt").read_bytes() == b"new"

    def test_keep_old_not_applied_when_download_fails(self, store_factory, local_root, operator):
        (local_root / "a.txt").write_bytes(b"old")
        store = store_factory({"a.txt": b"new"}, failing={"a.txt"})

        _scheduler(store, local_root, operator, keep_old=True).run(_records(store))

        assert (local_root / "a.txt").read_bytes() == b"old"
        assert sorted(p.name for p in local_root.iterdir()) == ["a.txt"]

    def test_cancel_before_start(self, store_factory, local_root, operator):
        store = store_factory({f"f{i}": b"x" for i in range(3)})
        cancel = threading.Event()
        cancel.set()

        stats = _scheduler(store, local_root, operator, cancel_event=cancel).run(_records(store))

        assert store.downloaded == []
        assert stats.cancelled == 3
        assert stats.failed == 0
        assert stats.downloaded == 0

    def test_cancel_in_flight(self, store_factory, local_root, operator):
        store = store_factory({f"f{i}": b"x" for i in range(6)}, delay=0.1)
        cancel = threading.Event()
        timer = threading.Timer(0.05, cancel.set)
        timer.start()

        try:
            stats = _scheduler(store, local_root, operator, threads=2, cancel_event=cancel).run(_records(store))
        finally:
            timer.cancel()

        assert stats.cancelled == 6
        assert stats.downloaded == 0
        assert list(local_root.iterdir()) == []

    def test_empty_input(self, store_factory, local_root, operator):
        stats = _scheduler(store_factory(), local_root, operator).run([])
        assert stats.scheduled == 0
        assert stats.downloaded == 0

    def test_keyboard_interrupt_cancels_outstanding(self, store_factory, local_root, operator):
        store = store_factory({"boom": b"!", "a": b"1", "b": b"2", "c": b"3"}, delay=0.1)
        real_download = store.download

        def interrupting_download(name, destination, *, cancel_event=None):
            if name == "boom":
                raise KeyboardInterrupt
            return real_download(name, destination, cancel_event=cancel_event)

        store.download = interrupting_download
        cancel = threading.Event()
        scheduler = _scheduler(store, local_root, operator, threads=1, cancel_event=cancel)

        with pytest.raises(KeyboardInterrupt):
            scheduler.run(_records(store))

        assert cancel.is_set()
        assert scheduler.stats.cancelled == 3
        assert scheduler.stats.succeeded == 0
        assert store.downloaded == []
        assert list(local_root.iterdir()) == []
