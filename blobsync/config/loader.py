# blobsync Configuration Loader
# Load, save, and validate YAML configuration files

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from blobsync.config.defaults import generate_default_config, get_default_config
from blobsync.config.schema import BlobSyncConfig, SyncOptions

CONFIG_ENV_VAR = "BLOBSYNC_CONFIG"

_PROMPTS = {
    "connection_string": "Enter Azure Storage Account connection string: ",
    "container": "Enter container name: ",
    "path": "Enter local path: ",
}


class MissingOptionError(ValueError):
    """A required run option was neither given nor configured."""


def get_config_dir() -> Path:
    """Get the blobsync configuration directory."""
    return Path.home() / ".config" / "blobsync"


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    # Allow override via environment variable
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / "config.yaml"


def ensure_config_dir(config_path: Optional[Path] = None) -> Path:
    """Ensure the configuration directory exists."""
    config_dir = config_path.parent if config_path else get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def load_config(config_path: Optional[Path] = None, *, missing_ok: bool = False) -> BlobSyncConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Optional path to config file. Uses default if not provided.
        missing_ok: Return the built-in defaults when the file doesn't exist.

    Returns:
        BlobSyncConfig: Validated configuration object.

    Raises:
        FileNotFoundError: If config file doesn't exist and missing_ok is False.
        ValidationError: If config file is invalid.
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        if missing_ok:
            return BlobSyncConfig.model_validate(get_default_config())
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\nRun 'blobsync config init' to create one."
        )

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}

    return BlobSyncConfig.model_validate(_merge_with_defaults(data))


def save_config(config: BlobSyncConfig, config_path: Optional[Path] = None) -> Path:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration object to save.
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Path: Path where config was saved.
    """
    if config_path is None:
        config_path = get_config_path()

    ensure_config_dir(config_path)

    data = config.model_dump(exclude_none=True, mode="json")

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    return config_path


def ensure_config_exists(config_path: Optional[Path] = None, *, overwrite: bool = False) -> tuple[Path, bool]:
    """
    Ensure configuration file exists, creating default if needed.

    Returns:
        Tuple of (config_path, was_created).
    """
    if config_path is None:
        config_path = get_config_path()

    if config_path.exists() and not overwrite:
        return config_path, False

    ensure_config_dir(config_path)
    config_path.write_text(generate_default_config(), encoding="utf-8")
    return config_path, True


def validate_config_file(config_path: Optional[Path] = None) -> tuple[bool, list[str]]:
    """
    Validate a configuration file without loading it into the system.

    Args:
        config_path: Path to config file to validate.

    Returns:
        Tuple of (is_valid, error_messages).
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return False, [f"Configuration file not found: {config_path}"]

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return False, [f"Invalid YAML syntax: {e}"]

    if data is None:
        return False, ["Configuration file is empty"]

    if not isinstance(data, dict):
        return False, ["Configuration root must be a mapping"]

    errors: list[str] = []
    try:
        BlobSyncConfig.model_validate(data)
    except ValidationError as e:
        for error in e.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")
        return False, errors

    unknown = sorted(set(data) - set(BlobSyncConfig.model_fields))
    for key in unknown:
        errors.append(f"Unknown section '{key}'")

    return len(errors) == 0, errors


def _merge_with_defaults(data: dict) -> dict:
    """Merge loaded data with default values for missing keys."""
    result = get_default_config()

    for section in ("defaults", "output"):
        if data.get(section):
            result[section] = {**result[section], **data[section]}

    return result


def build_options(
    config: BlobSyncConfig,
    *,
    ask: Optional[Callable[[str], str]] = None,
    **overrides: Any,
) -> SyncOptions:
    """
    Build the run options from file defaults and command-line values.

    Values passed as None fall back to the configuration file. Required
    values still missing are requested through ``ask`` when given.

    Args:
        config: Loaded configuration.
        ask: Optional prompt callback for missing required values.
        **overrides: Command-line values (None means "not given").

    Returns:
        Validated SyncOptions.

    Raises:
        MissingOptionError: If a required value is unavailable.
        ValidationError: If a value is malformed.
    """
    values: dict[str, Any] = {
        key: value for key, value in config.defaults.model_dump().items() if value is not None
    }
    values.update({key: value for key, value in overrides.items() if value is not None})

    for key, prompt in _PROMPTS.items():
        if values.get(key):
            continue
        if ask is None:
            raise MissingOptionError(f"Missing required option: {key.replace('_', ' ')}")
        values[key] = ask(prompt)

    return SyncOptions.model_validate(values)
