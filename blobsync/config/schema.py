# blobsync Configuration Schema
# Pydantic models for YAML configuration and run options

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blobsync.utils.paths import expand_path

DEFAULT_THREADS = 10

DEVELOPMENT_STORAGE = "UseDevelopmentStorage=true"


class SyncDefaults(BaseModel):
    """Per-user defaults for sync runs, overridable on the command line."""

    container: Optional[str] = Field(default=None, description="Default blob container name")
    path: Optional[str] = Field(default=None, description="Default local folder path")
    threads: int = Field(default=DEFAULT_THREADS, ge=1, description="Download threads")
    keep_old: bool = Field(default=False, description="Keep old local copies of overwritten files")
    compare_hash: bool = Field(default=True, description="Compare Content-MD5 in addition to name and size")

    @field_validator("path")
    @classmethod
    def normalize_path(cls, v: Optional[str]) -> Optional[str]:
        """Expand ~ and variables in path."""
        if v is None:
            return None
        return str(expand_path(v))


class OutputConfig(BaseModel):
    """Output and logging configuration."""

    verbose: bool = Field(default=False, description="Enable verbose output")
    colored: bool = Field(default=True, description="Enable colored output")
    log_file: Optional[str] = Field(default=None, description="Append a summary line per run to this file")

    @field_validator("log_file")
    @classmethod
    def expand_optional_paths(cls, v: Optional[str]) -> Optional[str]:
        """Expand ~ and variables in optional paths."""
        if v is None:
            return None
        return str(expand_path(v))


class BlobSyncConfig(BaseModel):
    """Root configuration model for blobsync."""

    defaults: SyncDefaults = Field(default_factory=SyncDefaults, description="Sync defaults")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output settings")


class SyncOptions(BaseModel):
    """
    Validated, immutable options for one sync run.

    Built once before the run starts and handed to every component.
    """

    model_config = ConfigDict(frozen=True)

    connection_string: str = Field(description="Storage account connection string", repr=False)
    container: str = Field(description="Blob container name")
    path: Path = Field(description="Local folder path")
    threads: int = Field(default=DEFAULT_THREADS, ge=1, description="Download threads")
    silence: bool = Field(default=False, description="Run without interactive prompts")
    keep_old: bool = Field(default=False, description="Keep old local copies and redundant files")
    compare_hash: bool = Field(default=True, description="Compare file hash")

    @field_validator("connection_string")
    @classmethod
    def check_connection_string(cls, v: str) -> str:
        """Require an account name and key (or the local emulator shortcut)."""
        v = v.strip()
        if v == DEVELOPMENT_STORAGE:
            return v
        if "AccountName=" not in v or "AccountKey=" not in v:
            raise ValueError("Invalid connection string format.")
        return v

    @field_validator("container")
    @classmethod
    def check_container(cls, v: str) -> str:
        """Container name must not be blank."""
        v = v.strip()
        if not v:
            raise ValueError("Container name must not be empty.")
        return v

    @field_validator("path", mode="before")
    @classmethod
    def absolute_path(cls, v: str | Path) -> Path:
        """Expand ~ and variables and make the path absolute."""
        if not str(v).strip():
            raise ValueError("Local path must not be empty.")
        return expand_path(v)

    def parameter_table(self) -> dict[str, str]:
        """Parameters shown to the operator before the run."""
        return {
            "Container Name": self.container,
            "Download Threads": str(self.threads),
            "Local Path": str(self.path),
            "Keep Old": str(self.keep_old),
            "Compare Hash": str(self.compare_hash),
        }
