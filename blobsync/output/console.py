# blobsync Console Output
# Rich-based console output for user-friendly display

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.traceback import Traceback

from blobsync import __version__
from blobsync.sync.record import FileRecord

if TYPE_CHECKING:
    from blobsync.sync.engine import SyncResult


class Console:
    """
    Console output manager using Rich.

    Provides formatted output for sync operations. Rich serializes writes
    internally, so download threads may print concurrently.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output.
        """
        self.verbose = verbose
        self._console = RichConsole(no_color=not colored, highlight=False)

    @property
    def rich(self) -> RichConsole:
        """Underlying Rich console."""
        return self._console

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self._console.print(f"[red]Error:[/red] {escape(message)}")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self._console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def print_success(self, message: str) -> None:
        """Print success message."""
        self._console.print(f"[green]{escape(message)}[/green]")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self._console.print(escape(message))

    def print_debug(self, message: str) -> None:
        """Print message only in verbose mode."""
        if self.verbose:
            self._console.print(f"[dim]{escape(message)}[/dim]")

    def print_exception(self, exc: BaseException) -> None:
        """Print an exception with its message; traceback only in verbose mode."""
        if self.verbose:
            self._console.print(Traceback.from_exception(type(exc), exc, exc.__traceback__))
        self.print_error(f"{type(exc).__name__}: {exc}")

    def print_parameters(self, title: str, params: dict[str, str]) -> None:
        """
        Print run parameters as a two-column table.

        Args:
            title: Table title.
            params: Parameter name to display value.
        """
        table = Table(title=f"{title} {__version__}", show_header=True, header_style="bold")
        table.add_column("Parameter", style="blue")
        table.add_column("Value")

        for name, value in params.items():
            table.add_row(name, escape(value))

        self._console.print(table)

    def print_file_table(self, records: Iterable[FileRecord]) -> None:
        """Print file records with name, length and hash."""
        table = Table(show_header=True, header_style="bold")
        table.add_column("File Name", style="cyan")
        table.add_column("Length (bytes)", justify="right")
        table.add_column("Content-MD5")

        for record in records:
            table.add_row(
                escape(record.name),
                str(record.length) if record.length is not None else "Unknown",
                record.content_hash if record.has_hash else "[dim]Not calculated[/dim]",
            )

        self._console.print(table)

    def print_summary(self, result: SyncResult) -> None:
        """
        Print sync result summary.

        Args:
            result: Sync result to display.
        """
        self._console.print()

        if result.cancelled:
            status_text = "[yellow]Sync cancelled[/yellow]"
            border = "yellow"
        elif result.failed:
            status_text = "[yellow]Sync completed with errors[/yellow]"
            border = "yellow"
        else:
            status_text = "[green]Local files up to date[/green]"
            border = "green"

        self._console.print(
            Panel(
                f"{status_text}\n"
                f"[green]{result.downloaded}[/green] file(s) downloaded, "
                f"[yellow]{result.deleted}[/yellow] file(s) deleted, "
                f"{result.archived_skipped} archived file(s) skipped, "
                f"[red]{result.failed}[/red] failed",
                title="Summary",
                border_style=border,
            )
        )
