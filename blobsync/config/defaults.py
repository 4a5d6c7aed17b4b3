# blobsync Default Configuration
# Full default configuration as Python dict and YAML generator

import copy
from typing import Any

import yaml

from blobsync.config.schema import DEFAULT_THREADS

DEFAULT_CONFIG: dict[str, Any] = {
    "defaults": {
        "container": None,
        "path": None,
        "threads": DEFAULT_THREADS,
        "keep_old": False,
        "compare_hash": True,
    },
    "output": {
        "verbose": False,
        "colored": True,
        "log_file": None,
    },
}


def get_default_config() -> dict[str, Any]:
    """Return a deep copy of the default configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


def generate_default_config() -> str:
    """Generate default configuration as YAML string with comments."""
    header = """# blobsync Configuration
#
# Defaults for one-way sync of an Azure Blob Storage container into a local
# folder. Every value can be overridden on the command line.
#
# The connection string is never stored here. Pass it with --connection or
# the AZURE_STORAGE_CONNECTION_STRING environment variable.
#
# defaults:
#   container:     blob container name
#   path:          local folder (created if missing)
#   threads:       concurrent downloads (>= 1)
#   keep_old:      rename overwritten files to <name>_<yyyyMMdd_HHmmss><ext>
#                  and never delete redundant local files
#   compare_hash:  compare Content-MD5 in addition to name and size

"""
    return header + yaml.dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False, allow_unicode=True)
