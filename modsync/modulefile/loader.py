# modsync Modulefile Loader
# Parse the YAML module list into descriptors and managed content

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from modsync.config.schema import ModuleEntry, ModulefileSpec, SourceKind
from modsync.errors import LoadError
from modsync.logger import get_logger
from modsync.module.descriptor import ModuleDescriptor
from modsync.utils.paths import clean_path, is_within

logger = get_logger(__name__)

DEFAULT_REF = "main"


@dataclass
class LoadResult:
    """Descriptors and managed content produced by one load."""

    modules: list[ModuleDescriptor] = field(default_factory=list)
    managed_content: dict[Path, set[str]] = field(default_factory=dict)
    moduledir: Optional[Path] = None


class ModulefileLoader:
    """
    Reads a Modulefile and resolves every entry to a descriptor.

    Relative paths are resolved against the base directory. Each call to
    load() builds a fresh result; nothing is carried over between loads.
    """

    def __init__(
        self,
        path: Path,
        base_directory: Path,
        install_directory: Path,
        *,
        reference_override: Optional[str] = None,
        force: bool = False,
    ):
        self.path = path
        self.base_directory = clean_path(base_directory)
        self.install_directory = clean_path(install_directory)
        self.reference_override = reference_override
        self.force = force

    def load(self) -> LoadResult:
        """
        Load and validate the module list.

        Returns:
            LoadResult with descriptors in file order.

        Raises:
            LoadError: If the file is missing, unreadable or invalid.
        """
        spec = self._read_spec()

        moduledir = self.install_directory
        if spec.moduledir:
            moduledir = self._resolve(spec.moduledir)

        result = LoadResult(moduledir=moduledir)
        seen: set[str] = set()

        for entry in spec.modules:
            if entry.name in seen:
                raise LoadError(f"Duplicate module name '{entry.name}' in {self.path}", path=self.path)
            seen.add(entry.name)

            descriptor = self._descriptor(entry, moduledir)
            result.modules.append(descriptor)
            result.managed_content.setdefault(descriptor.install_path, set()).add(descriptor.name)

        logger.debug("Loaded %d modules from %s", len(result.modules), self.path)
        return result

    def _read_spec(self) -> ModulefileSpec:
        if not self.path.is_file():
            raise LoadError(f"Modulefile not found: {self.path}", path=self.path)

        try:
            with open(self.path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise LoadError(f"Invalid YAML in {self.path}: {e}", path=self.path) from e
        except OSError as e:
            raise LoadError(f"Could not read {self.path}: {e}", path=self.path) from e

        if data is None:
            data = {}

        if not isinstance(data, dict):
            raise LoadError(f"{self.path} must contain a mapping with a 'modules' list", path=self.path)

        try:
            return ModulefileSpec.model_validate(data)
        except ValidationError as e:
            messages = []
            for error in e.errors():
                loc = " -> ".join(str(part) for part in error["loc"])
                messages.append(f"{loc}: {error['msg']}")
            raise LoadError(f"Invalid Modulefile {self.path}:\n  " + "\n  ".join(messages), path=self.path) from e

    def _resolve(self, value: str) -> Path:
        path = Path(os.path.expanduser(value))
        if not path.is_absolute():
            path = self.base_directory / path
        return clean_path(path)

    def _descriptor(self, entry: ModuleEntry, moduledir: Path) -> ModuleDescriptor:
        install_path = moduledir
        if entry.install_path is not None:
            install_path = self._resolve(entry.install_path)
            if not is_within(install_path, self.base_directory):
                raise LoadError(
                    f"Module '{entry.name}' cannot be installed outside {self.base_directory}: {install_path}",
                    path=self.path,
                )

        kind = entry.source_kind
        if kind == SourceKind.VCS:
            origin = entry.git or ""
            desired = entry.ref or self.reference_override or DEFAULT_REF
        elif kind == SourceKind.REGISTRY:
            origin = entry.registry or ""
            desired = entry.version or ""
        else:
            origin = str(self._resolve(entry.local or ""))
            desired = origin

        return ModuleDescriptor(
            name=entry.name,
            install_path=install_path,
            source_kind=kind,
            desired_state=desired,
            origin=origin,
            force=self.force,
            options=dict(entry.options),
        )
