# blobsync Operator Interaction
# Prompts, notices and tables between the sync engine and the user

from collections.abc import Iterator
from contextlib import contextmanager, nullcontext
from typing import ContextManager, Protocol

import click
from rich.prompt import Confirm, Prompt

from blobsync.output.console import Console
from blobsync.sync.record import FileRecord


class Operator(Protocol):
    """Everything the sync engine needs from the person running it."""

    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def exception(self, exc: BaseException) -> None: ...

    def confirm(self, prompt: str, default: bool = True) -> bool: ...

    def ask(self, prompt: str) -> str: ...

    def read_key(self) -> str: ...

    def show_parameters(self, title: str, params: dict[str, str]) -> None: ...

    def show_file_table(self, records: list[FileRecord]) -> None: ...

    def status(self, message: str) -> ContextManager[None]: ...


class ConsoleOperator:
    """
    Operator backed by the Rich console.

    In silent mode every confirmation is answered with yes and no key is
    read; notices and tables are still printed.
    """

    def __init__(self, console: Console, *, silent: bool = False):
        self.console = console
        self.silent = silent

    def info(self, message: str) -> None:
        self.console.print_info(message)

    def success(self, message: str) -> None:
        self.console.print_success(message)

    def warning(self, message: str) -> None:
        self.console.print_warning(message)

    def error(self, message: str) -> None:
        self.console.print_error(message)

    def exception(self, exc: BaseException) -> None:
        self.console.print_exception(exc)

    def confirm(self, prompt: str, default: bool = True) -> bool:
        if self.silent:
            return True
        return Confirm.ask(prompt, default=default, console=self.console.rich)

    def ask(self, prompt: str) -> str:
        if self.silent:
            raise click.UsageError(f"Cannot prompt in silent mode: {prompt.strip()}")
        return Prompt.ask(prompt, console=self.console.rich)

    def read_key(self) -> str:
        if self.silent:
            return ""
        key = click.getchar()
        self.console.print()
        return key

    def show_parameters(self, title: str, params: dict[str, str]) -> None:
        self.console.print_parameters(title, params)

    def show_file_table(self, records: list[FileRecord]) -> None:
        self.console.print_file_table(records)

    def status(self, message: str) -> ContextManager[None]:
        """Spinner around a long-running block; plain notice when silent."""
        if self.silent:
            self.console.print_info(message)
            return nullcontext()
        return self._spinner(message)

    @contextmanager
    def _spinner(self, message: str) -> Iterator[None]:
        with self.console.rich.status(message, spinner="dots"):
            yield
