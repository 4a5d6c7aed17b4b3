# blobsync Path Utilities
# Destination resolution, timestamped renames and atomic placement

import os
import re
import tempfile
from datetime import datetime
from pathlib import Path

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

TEMP_SUFFIX = ".part"

_SEPARATORS = re.compile(r"[\\/]+")


def expand_path(path: str | Path) -> Path:
    """
    Expand ~ and environment variables and make the path absolute.

    Symlinks are left as they are.

    Args:
        path: Path string or Path object.

    Returns:
        Expanded, absolute Path object.
    """
    path_str = os.path.expandvars(os.path.expanduser(str(path)))
    return Path(path_str).absolute()


def ensure_dir(path: Path) -> Path:
    """
    Ensure directory exists, creating if necessary.

    Creating an already existing directory is a no-op, so concurrent
    callers can race on the same parent.

    Args:
        path: Directory path.

    Returns:
        The path that was ensured.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def split_object_name(name: str) -> list[str]:
    """
    Split an object name into local path components.

    Args:
        name: Remote object name, possibly containing "/" separators.

    Returns:
        List of path components.

    Raises:
        ValueError: If the name is empty or would escape the target directory.
    """
    parts = [part for part in _SEPARATORS.split(name) if part]
    if not parts:
        raise ValueError(f"Invalid object name: {name!r}")
    for part in parts:
        if part in (".", ".."):
            raise ValueError(f"Object name escapes the target directory: {name!r}")
    return parts


def resolve_destination(root: Path, name: str, *, create_parents: bool = True) -> Path:
    """
    Resolve the local path for an object name below root.

    Args:
        root: Local sync directory.
        name: Remote object name.
        create_parents: Create intermediate directories implied by the name.

    Returns:
        Destination file path.
    """
    dest = root.joinpath(*split_object_name(name))
    if create_parents:
        ensure_dir(dest.parent)
    return dest


def timestamped_name(path: Path, now: datetime | None = None) -> Path:
    """
    Build the preserved-copy path for an existing file.

    Pattern is ``<stem>_<YYYYMMDD_HHMMSS><suffix>`` in the same directory.

    Args:
        path: Existing file path.
        now: Timestamp to use (defaults to local clock).

    Returns:
        Path for the preserved copy.
    """
    stamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    return path.with_name(f"{path.stem}_{stamp}{path.suffix}")


def preserve_existing(path: Path, now: datetime | None = None) -> Path | None:
    """
    Move an existing file aside under its timestamped name.

    A preserved copy with the same name is replaced (last rename wins).

    Args:
        path: File that is about to be overwritten.
        now: Timestamp to use.

    Returns:
        Path of the preserved copy, or None if nothing existed.
    """
    if not path.exists():
        return None
    target = timestamped_name(path, now)
    os.replace(path, target)
    return target


def temp_path_for(dest: Path) -> Path:
    """
    Create an empty temporary file next to dest for atomic placement.

    Args:
        dest: Final destination path.

    Returns:
        Path of the temporary file.
    """
    fd, temp_path = tempfile.mkstemp(dir=dest.parent, prefix=f".{dest.name}.", suffix=TEMP_SUFFIX)
    os.close(fd)
    return Path(temp_path)


def is_temp_file(path: Path) -> bool:
    """Check if path looks like an in-progress download from temp_path_for."""
    return path.name.startswith(".") and path.name.endswith(TEMP_SUFFIX)


def safe_delete(path: Path, *, missing_ok: bool = False) -> bool:
    """
    Safely delete a file.

    Args:
        path: Path to delete.
        missing_ok: If True, don't raise error if path doesn't exist.

    Returns:
        True if something was deleted, False if path didn't exist.

    Raises:
        FileNotFoundError: If path doesn't exist and missing_ok is False.
    """
    if not path.exists():
        if missing_ok:
            return False
        raise FileNotFoundError(f"Path does not exist: {path}")

    path.unlink()
    return True
