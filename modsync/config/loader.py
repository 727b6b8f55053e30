# modsync Configuration Loader
# Load, save, and validate YAML settings files

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from modsync.config.defaults import DEFAULT_SETTINGS, generate_default_settings
from modsync.config.schema import DeploySettings


def get_config_dir() -> Path:
    """Get the modsync configuration directory."""
    return Path.home() / ".config" / "modsync"


def get_config_path() -> Path:
    """Get the path to the settings file."""
    # Allow override via environment variable
    env_path = os.environ.get("MODSYNC_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / "config.yaml"


def load_settings(config_path: Optional[Path] = None, **overrides) -> DeploySettings:
    """
    Load settings from a YAML file.

    Args:
        config_path: Optional path to settings file. Uses default if not provided.
        **overrides: Values that replace the file's values (None values are ignored).

    Returns:
        DeploySettings: Validated settings object.

    Raises:
        FileNotFoundError: If settings file doesn't exist.
        ValidationError: If settings file is invalid.
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        raise FileNotFoundError(f"Settings file not found: {config_path}\nRun 'modsync init' to create one.")

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}

    merged = _merge_with_defaults(data)
    merged.update({key: value for key, value in overrides.items() if value is not None})

    return DeploySettings.model_validate(merged)


def save_settings(settings: DeploySettings, config_path: Optional[Path] = None) -> Path:
    """
    Save settings to a YAML file.

    Args:
        settings: Settings object to save.
        config_path: Optional path to settings file. Uses default if not provided.

    Returns:
        Path: Path where settings were saved.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)
    data = settings.model_dump(exclude_none=True, mode="json")

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    return config_path


def write_default_settings(base_directory: str, config_path: Optional[Path] = None) -> tuple[Path, bool]:
    """
    Write a default settings file unless one exists.

    Returns:
        Tuple of (config_path, was_created).
    """
    if config_path is None:
        config_path = get_config_path()

    if config_path.exists():
        return config_path, False

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(generate_default_settings(base_directory), encoding="utf-8")
    return config_path, True


def validate_settings_file(config_path: Optional[Path] = None) -> tuple[bool, list[str]]:
    """
    Validate a settings file without loading it into the system.

    Args:
        config_path: Path to settings file to validate.

    Returns:
        Tuple of (is_valid, error_messages).
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return False, [f"Settings file not found: {config_path}"]

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return False, [f"Invalid YAML syntax: {e}"]

    if data is None:
        return False, ["Settings file is empty"]

    if not isinstance(data, dict):
        return False, ["Settings file must contain a mapping"]

    errors: list[str] = []
    try:
        DeploySettings.model_validate(_merge_with_defaults(data))
    except ValidationError as e:
        for error in e.errors():
            loc = " -> ".join(str(part) for part in error["loc"]) or "settings"
            errors.append(f"{loc}: {error['msg']}")

    return len(errors) == 0, errors


def _merge_with_defaults(data: dict) -> dict:
    """Merge loaded data with default values for missing keys."""
    result = DEFAULT_SETTINGS.copy()
    result.update(data)
    return result
