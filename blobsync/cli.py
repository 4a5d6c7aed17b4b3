"""Click-based CLI for blobsync."""

from __future__ import annotations

import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional

import click
import yaml
from pydantic import ValidationError

from blobsync import __version__
from blobsync.config import (
    MissingOptionError,
    SyncOptions,
    build_options,
    ensure_config_exists,
    get_config_path,
    load_config,
    validate_config_file,
)
from blobsync.output.console import Console
from blobsync.output.operator import ConsoleOperator
from blobsync.store.azure import AzureBlobStore
from blobsync.sync.engine import SyncEngine, SyncResult

EXIT_INTERRUPTED = 130


def _format_validation_error(error: ValidationError) -> str:
    """Flatten pydantic errors into one line per field."""
    lines = []
    for err in error.errors():
        loc = " -> ".join(str(part) for part in err["loc"]) or "options"
        lines.append(f"{loc}: {err['msg']}")
    return "\n".join(lines)


def _append_sync_log(log_file: Optional[str], options: SyncOptions, result: SyncResult) -> None:
    """Append a one-line summary of the run to the sync history file."""
    if not log_file:
        return

    status = "ok" if result.success else "error"
    if result.cancelled:
        status = "cancelled"
    entry = (
        f"{datetime.now().isoformat(timespec='seconds')} container={options.container} "
        f"path={options.path} downloaded={result.downloaded} deleted={result.deleted} "
        f"archived={result.archived_skipped} failed={result.failed} status={status}\n"
    )

    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(entry)


@click.group()
@click.version_option(version=__version__, prog_name="blobsync")
def cli() -> None:
    """blobsync - Azure Blob Storage to local folder sync.

    Downloads blobs that are missing or changed locally and optionally
    removes local files that no longer exist in the container.

    \b
    Workflows:
      blobsync sync -c photos -p ~/backup/photos
      blobsync sync --silence --keep-old
      blobsync config init
    """
    pass


@cli.command()
@click.option(
    "--connection",
    "-s",
    "connection_string",
    envvar="AZURE_STORAGE_CONNECTION_STRING",
    help="Storage account connection string",
)
@click.option("--container", "-c", help="Blob container name")
@click.option("--path", "-p", type=click.Path(file_okay=False, path_type=Path), help="Local folder path")
@click.option("--threads", "-t", type=click.IntRange(min=1), default=None, help="Download threads (default: 10)")
@click.option("--silence", is_flag=True, help="Silence mode: no prompts, answer yes to everything")
@click.option(
    "--keep-old/--no-keep-old",
    default=None,
    help="Keep overwritten files under a timestamped name and never delete redundant files",
)
@click.option("--compare-hash/--no-compare-hash", default=None, help="Compare file hash (default: on)")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: ~/.config/blobsync/config.yaml)",
)
def sync(
    connection_string: Optional[str],
    container: Optional[str],
    path: Optional[Path],
    threads: Optional[int],
    silence: bool,
    keep_old: Optional[bool],
    compare_hash: Optional[bool],
    verbose: bool,
    config_path: Optional[Path],
) -> None:
    """Synchronize a blob container into a local folder.

    Blobs missing locally, or differing in size or hash, are downloaded.
    Blobs in the Archive tier are skipped. Local files that no longer
    exist in the container can be deleted after confirmation.
    """
    try:
        config = load_config(config_path, missing_ok=config_path is None)
    except FileNotFoundError as e:
        Console().print_error(str(e))
        sys.exit(1)
    except yaml.YAMLError as e:
        Console().print_error(f"Invalid YAML syntax: {e}")
        sys.exit(1)
    except ValidationError as e:
        Console().print_error(f"Invalid configuration:\n{_format_validation_error(e)}")
        sys.exit(1)

    console = Console(verbose=verbose or config.output.verbose, colored=config.output.colored)
    operator = ConsoleOperator(console, silent=silence)

    try:
        options = build_options(
            config,
            ask=None if silence else operator.ask,
            connection_string=connection_string,
            container=container,
            path=path,
            threads=threads,
            silence=silence,
            keep_old=keep_old,
            compare_hash=compare_hash,
        )
    except ValidationError as e:
        console.print_error(f"Invalid options:\n{_format_validation_error(e)}")
        sys.exit(1)
    except (MissingOptionError, click.UsageError) as e:
        console.print_error(str(e))
        sys.exit(1)

    try:
        store = AzureBlobStore(options.connection_string, options.container)
    except ValueError as e:
        console.print_error(f"Invalid connection string: {e}")
        sys.exit(1)

    cancel_event = threading.Event()
    engine = SyncEngine(options, store, operator, cancel_event=cancel_event)

    try:
        result = engine.run()
    except KeyboardInterrupt:
        cancel_event.set()
        console.print_warning("Interrupted - outstanding downloads cancelled")
        sys.exit(EXIT_INTERRUPTED)

    if result.aborted:
        console.print_info("Sync cancelled")
        return

    if result.success:
        console.print_summary(result)

    _append_sync_log(config.output.log_file, options, result)

    if not result.success:
        sys.exit(result.exit_code)


# ============================================================================
# Configuration Commands
# ============================================================================


@cli.group()
def config() -> None:
    """Configuration file management.

    \b
    Examples:
      blobsync config init          Create default configuration
      blobsync config show          Show active configuration
      blobsync config check FILE    Validate a configuration file
    """
    pass


@config.command("init")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing configuration file")
def config_init(force: bool) -> None:
    """Create the default configuration file."""
    console = Console()
    config_path, created = ensure_config_exists(overwrite=force)

    if created:
        console.print_success(f"Created configuration: {config_path}")
    else:
        console.print_warning(f"Configuration already exists: {config_path} (use --force to overwrite)")


@config.command("show")
def config_show() -> None:
    """Show the active configuration."""
    console = Console()
    config_path = get_config_path()

    try:
        cfg = load_config(missing_ok=True)
    except (ValidationError, yaml.YAMLError) as e:
        console.print_error(f"Invalid configuration {config_path}: {e}")
        sys.exit(1)

    source = str(config_path) if config_path.exists() else f"{config_path} (not found, using defaults)"
    console.print_info(f"Configuration: {source}")

    params = {f"defaults.{k}": str(v) for k, v in cfg.defaults.model_dump().items()}
    params.update({f"output.{k}": str(v) for k, v in cfg.output.model_dump().items()})
    console.print_parameters("blobsync configuration", params)


@config.command("check")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def config_check(file: Path) -> None:
    """Validate a configuration file."""
    console = Console()
    valid, errors = validate_config_file(file)

    if valid:
        console.print_success(f"Configuration is valid: {file}")
        return

    console.print_error(f"Configuration is invalid: {file}")
    for error in errors:
        console.print(f"  • {error}")
    sys.exit(1)


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
