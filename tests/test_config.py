# modsync Config Tests
# Tests for settings loading and validation

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from modsync.config.defaults import DEFAULT_SETTINGS, generate_default_settings
from modsync.config.loader import (
    get_config_path,
    load_settings,
    save_settings,
    validate_settings_file,
    write_default_settings,
)
from modsync.config.schema import DEFAULT_CONCURRENCY, DeploySettings, ModuleEntry, SourceKind


class TestDeploySettings:
    """Tests for DeploySettings schema."""

    def test_minimal_settings(self, base_dir: Path):
        """Test derived defaults from the base directory."""
        settings = DeploySettings(base_directory=str(base_dir))

        assert settings.install_path == base_dir / "modules"
        assert settings.modulefile_path == base_dir / "Modulefile.yaml"
        assert settings.concurrency_budget == DEFAULT_CONCURRENCY
        assert settings.registry_path is None

    def test_explicit_paths(self, base_dir: Path, temp_dir: Path):
        settings = DeploySettings(
            base_directory=str(base_dir),
            install_directory=str(temp_dir / "elsewhere"),
            modulefile=str(temp_dir / "Modules.yaml"),
            registry_directory=str(temp_dir / "registry"),
        )
        assert settings.install_path == temp_dir / "elsewhere"
        assert settings.modulefile_path == temp_dir / "Modules.yaml"
        assert settings.registry_path == temp_dir / "registry"

    def test_path_expansion(self, monkeypatch, temp_dir: Path):
        """Test that ~ is expanded in paths."""
        monkeypatch.setenv("HOME", str(temp_dir))
        settings = DeploySettings(base_directory="~/deploy")
        assert settings.base_directory == str(temp_dir / "deploy")

    @pytest.mark.parametrize("budget", [0, -2])
    def test_budget_must_be_positive(self, base_dir: Path, budget):
        with pytest.raises(ValidationError):
            DeploySettings(base_directory=str(base_dir), concurrency_budget=budget)

    def test_log_level_normalized(self, base_dir: Path):
        assert DeploySettings(base_directory=str(base_dir), log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self, base_dir: Path):
        with pytest.raises(ValidationError):
            DeploySettings(base_directory=str(base_dir), log_level="chatty")


class TestModuleEntry:
    """Tests for ModuleEntry schema."""

    def test_source_kinds(self):
        assert ModuleEntry(name="a", git="https://example.com/a.git").source_kind == SourceKind.VCS
        assert ModuleEntry(name="a", registry="acme/a", version="1.0.0").source_kind == SourceKind.REGISTRY
        assert ModuleEntry(name="a", local="../a").source_kind == SourceKind.LOCAL

    def test_requires_one_source(self):
        with pytest.raises(ValidationError, match="exactly one"):
            ModuleEntry(name="a", git="https://example.com/a.git", registry="acme/a", version="1.0.0")

    @pytest.mark.parametrize("name", ["a/b", "..", "."])
    def test_name_is_single_component(self, name):
        with pytest.raises(ValidationError):
            ModuleEntry(name=name, local="a")


class TestLoadSettings:
    """Tests for load_settings and friends."""

    def test_load(self, config_file: Path, base_dir: Path):
        settings = load_settings(config_file)
        assert settings.base_path == base_dir
        assert settings.concurrency_budget == 2
        assert settings.force is False

    def test_overrides(self, config_file: Path):
        settings = load_settings(config_file, concurrency_budget=1, force=True, reference_override=None)
        assert settings.concurrency_budget == 1
        assert settings.force is True
        assert settings.reference_override is None

    def test_missing_file(self, temp_dir: Path):
        with pytest.raises(FileNotFoundError, match="modsync init"):
            load_settings(temp_dir / "missing.yaml")

    def test_env_override(self, monkeypatch, temp_dir: Path):
        monkeypatch.setenv("MODSYNC_CONFIG", str(temp_dir / "custom.yaml"))
        assert get_config_path() == temp_dir / "custom.yaml"

    def test_save_and_reload(self, base_dir: Path, temp_dir: Path):
        settings = DeploySettings(base_directory=str(base_dir), concurrency_budget=3, reference_override="stable")
        path = save_settings(settings, temp_dir / "saved" / "config.yaml")

        loaded = load_settings(path)
        assert loaded.concurrency_budget == 3
        assert loaded.reference_override == "stable"

    def test_write_default_settings(self, base_dir: Path, temp_dir: Path):
        path, created = write_default_settings(str(base_dir), temp_dir / "new.yaml")
        assert created is True

        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert data["base_directory"] == str(base_dir)
        assert data["concurrency_budget"] == DEFAULT_SETTINGS["concurrency_budget"]

        _, created_again = write_default_settings(str(base_dir), path)
        assert created_again is False

    def test_generated_template_is_valid(self, base_dir: Path):
        data = yaml.safe_load(generate_default_settings(str(base_dir)))
        DeploySettings.model_validate(data)


class TestValidateSettingsFile:
    """Tests for validate_settings_file."""

    def test_valid(self, config_file: Path):
        assert validate_settings_file(config_file) == (True, [])

    def test_missing(self, temp_dir: Path):
        valid, errors = validate_settings_file(temp_dir / "missing.yaml")
        assert valid is False
        assert "not found" in errors[0]

    def test_invalid_yaml(self, temp_dir: Path):
        path = temp_dir / "bad.yaml"
        path.write_text("base_directory: [oops\n", encoding="utf-8")
        valid, errors = validate_settings_file(path)
        assert valid is False
        assert "Invalid YAML" in errors[0]

    def test_schema_errors(self, temp_dir: Path):
        path = temp_dir / "bad.yaml"
        path.write_text("concurrency_budget: 0\n", encoding="utf-8")
        valid, errors = validate_settings_file(path)

        assert valid is False
        assert any(error.startswith("base_directory") for error in errors)
        assert any(error.startswith("concurrency_budget") for error in errors)
