# blobsync Cleanup Coordinator
# Removal of local files that no longer exist remotely

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from blobsync.sync.record import FileRecord
from blobsync.utils.paths import safe_delete

if TYPE_CHECKING:
    from blobsync.output.operator import Operator

VIEW_KEY = "v"


@dataclass
class CleanupResult:
    """Result of the redundant-file cleanup."""

    candidates: int = 0
    deleted: int = 0
    failures: list[tuple[str, str]] = field(default_factory=list)
    declined: bool = False
    suppressed: bool = False


class CleanupCoordinator:
    """
    Deletes redundant local files after operator approval.

    When ``keep_old`` is set no file is ever deleted, even if approved.
    """

    def __init__(self, local_root: Path, *, silence: bool, keep_old: bool, operator: Operator):
        self.local_root = local_root
        self.silence = silence
        self.keep_old = keep_old
        self.operator = operator

    def run(self, redundant: list[FileRecord]) -> CleanupResult:
        """
        Offer and perform deletion of redundant files.

        Args:
            redundant: Local records with no remote counterpart.

        Returns:
            CleanupResult with the number of files actually deleted.
        """
        result = CleanupResult(candidates=len(redundant))
        if not redundant:
            return result

        if not self._approve(redundant):
            result.declined = True
            return result

        if self.keep_old:
            result.suppressed = True
            self.operator.info("Skipping deletion due to keep-old option.")
            return result

        for record in redundant:
            path = self.local_root / record.name
            try:
                if safe_delete(path, missing_ok=True):
                    result.deleted += 1
            except OSError as e:
                result.failures.append((record.name, str(e)))
                self.operator.error(f"Failed to delete {record.name}: {e}")

        return result

    def _approve(self, redundant: list[FileRecord]) -> bool:
        """Ask the operator to confirm deletion; silent runs auto-approve."""
        if self.silence:
            return True

        self.operator.warning(
            f"{len(redundant)} redundant file(s) found. Press 'V' to view them, any other key to continue."
        )
        if self.operator.read_key().lower() == VIEW_KEY:
            self.operator.show_file_table(redundant)

        return self.operator.confirm("Delete these files?", default=False)
