# modsync Configuration Module
# Handles YAML-based settings loading, validation, and defaults

from modsync.config.defaults import DEFAULT_SETTINGS, generate_default_settings
from modsync.config.loader import (
    get_config_path,
    load_settings,
    save_settings,
    validate_settings_file,
    write_default_settings,
)
from modsync.config.schema import (
    DeploySettings,
    ModuleEntry,
    ModulefileSpec,
    SourceKind,
)

__all__ = [
    # Schema
    "DeploySettings",
    "ModuleEntry",
    "ModulefileSpec",
    "SourceKind",
    # Loader
    "load_settings",
    "save_settings",
    "get_config_path",
    "write_default_settings",
    "validate_settings_file",
    # Defaults
    "DEFAULT_SETTINGS",
    "generate_default_settings",
]
