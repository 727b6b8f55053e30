# modsync Configuration Schema
# Pydantic models for settings and module list validation

from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from modsync.utils.paths import expand_path

DEFAULT_MODULEDIR = "modules"
DEFAULT_MODULEFILE = "Modulefile.yaml"
DEFAULT_CONCURRENCY = 4


class SourceKind(str, Enum):
    """Where a module's content comes from."""

    VCS = "vcs"
    REGISTRY = "registry"
    LOCAL = "local"


class DeploySettings(BaseModel):
    """Settings for one deployment tree."""

    base_directory: str = Field(description="Directory that contains the Modulefile and module directories")
    install_directory: Optional[str] = Field(
        default=None, description="Directory modules are installed into (default: <base_directory>/modules)"
    )
    modulefile: Optional[str] = Field(
        default=None, description="Path to the module list (default: <base_directory>/Modulefile.yaml)"
    )
    force: bool = Field(default=False, description="Overwrite local modifications and mismatched content")
    reference_override: Optional[str] = Field(
        default=None, description="Fallback ref for git modules that do not pin one"
    )
    concurrency_budget: int = Field(
        default=DEFAULT_CONCURRENCY, ge=1, description="Maximum module operations in flight (1 = serial)"
    )
    cache_directory: str = Field(default="~/.cache/modsync", description="Directory for git mirrors")
    registry_directory: Optional[str] = Field(default=None, description="Directory holding registry archives")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("base_directory", "install_directory", "modulefile", "cache_directory", "registry_directory")
    @classmethod
    def expand_paths(cls, v: Optional[str]) -> Optional[str]:
        """Expand ~ and environment variables in paths."""
        if v is None:
            return None
        return str(expand_path(v))

    @field_validator("log_level")
    @classmethod
    def check_level(cls, v: str) -> str:
        """Normalize and check the logging level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {v}")
        return level

    @model_validator(mode="after")
    def fill_defaults(self) -> "DeploySettings":
        """Derive install directory and Modulefile path from the base directory."""
        if self.install_directory is None:
            self.install_directory = str(Path(self.base_directory) / DEFAULT_MODULEDIR)
        if self.modulefile is None:
            self.modulefile = str(Path(self.base_directory) / DEFAULT_MODULEFILE)
        return self

    @property
    def base_path(self) -> Path:
        return Path(self.base_directory)

    @property
    def install_path(self) -> Path:
        return Path(self.install_directory or Path(self.base_directory) / DEFAULT_MODULEDIR)

    @property
    def modulefile_path(self) -> Path:
        return Path(self.modulefile or Path(self.base_directory) / DEFAULT_MODULEFILE)

    @property
    def cache_path(self) -> Path:
        return Path(self.cache_directory)

    @property
    def registry_path(self) -> Optional[Path]:
        return Path(self.registry_directory) if self.registry_directory else None


class ModuleEntry(BaseModel):
    """A single entry of the module list."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, description="Directory name of the installed module")
    git: Optional[str] = Field(default=None, description="Git remote URL")
    ref: Optional[str] = Field(default=None, description="Branch, tag or commit for git modules")
    registry: Optional[str] = Field(default=None, description="Registry slug as owner/name")
    version: Optional[str] = Field(default=None, description="Registry version")
    local: Optional[str] = Field(default=None, description="Local directory to link")
    install_path: Optional[str] = Field(default=None, description="Install directory for this module")
    options: dict[str, Any] = Field(default_factory=dict, description="Source-specific options")

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        """Module names are single path components."""
        if "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError(f"module name must be a single directory name: {v!r}")
        return v

    @model_validator(mode="after")
    def check_single_source(self) -> "ModuleEntry":
        """Exactly one source must be given."""
        given = [key for key in ("git", "registry", "local") if getattr(self, key)]
        if len(given) != 1:
            raise ValueError(f"module '{self.name}' must set exactly one of git, registry, local")
        if self.registry and self.registry.count("/") != 1:
            raise ValueError(f"registry slug must look like owner/name: {self.registry!r}")
        if self.registry and not self.version:
            raise ValueError(f"registry module '{self.name}' requires a version")
        return self

    @property
    def source_kind(self) -> SourceKind:
        if self.git:
            return SourceKind.VCS
        if self.registry:
            return SourceKind.REGISTRY
        return SourceKind.LOCAL


class ModulefileSpec(BaseModel):
    """Root model of the module list file."""

    model_config = ConfigDict(extra="forbid")

    moduledir: Optional[str] = Field(default=None, description="Install directory, relative to the base directory")
    modules: list[ModuleEntry] = Field(default_factory=list, description="Modules to deploy")
