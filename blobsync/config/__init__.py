# blobsync Configuration Module
# Handles YAML-based configuration loading, validation, and defaults

from blobsync.config.defaults import DEFAULT_CONFIG, generate_default_config, get_default_config
from blobsync.config.loader import (
    CONFIG_ENV_VAR,
    MissingOptionError,
    build_options,
    ensure_config_exists,
    get_config_path,
    load_config,
    save_config,
    validate_config_file,
)
from blobsync.config.schema import (
    DEFAULT_THREADS,
    BlobSyncConfig,
    OutputConfig,
    SyncDefaults,
    SyncOptions,
)

__all__ = [
    # Schema
    "BlobSyncConfig",
    "SyncDefaults",
    "OutputConfig",
    "SyncOptions",
    "DEFAULT_THREADS",
    # Loader
    "CONFIG_ENV_VAR",
    "MissingOptionError",
    "build_options",
    "load_config",
    "save_config",
    "get_config_path",
    "ensure_config_exists",
    "validate_config_file",
    # Defaults
    "DEFAULT_CONFIG",
    "get_default_config",
    "generate_default_config",
]
