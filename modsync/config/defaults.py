# modsync Default Configuration
# Default settings as Python dict and YAML template generator

from typing import Any

from modsync.config.schema import DEFAULT_CONCURRENCY

DEFAULT_SETTINGS: dict[str, Any] = {
    "force": False,
    "reference_override": None,
    "concurrency_budget": DEFAULT_CONCURRENCY,
    "cache_directory": "~/.cache/modsync",
    "registry_directory": None,
    "log_level": "INFO",
}


def generate_default_settings(base_directory: str) -> str:
    """
    Generate a commented settings file.

    Args:
        base_directory: Deployment base directory to write into the file.

    Returns:
        YAML text.
    """
    return f"""# modsync settings
# See 'modsync --help' for the commands that read this file.

# Directory holding Modulefile.yaml and the deployed modules
base_directory: {base_directory}

# Install directory (default: <base_directory>/modules)
# install_directory: {base_directory}/modules

# Module list (default: <base_directory>/Modulefile.yaml)
# modulefile: {base_directory}/Modulefile.yaml

# Overwrite local modifications in deployed modules
force: false

# Fallback ref for git modules that do not pin one
# reference_override: main

# Maximum module operations in flight (1 = serial, deterministic output)
concurrency_budget: {DEFAULT_CONCURRENCY}

# Bare git mirrors shared by modules with the same origin
cache_directory: ~/.cache/modsync

# Directory with <owner>-<name>-<version>.tar.gz archives
# registry_directory: /srv/modsync/registry

log_level: INFO
"""
