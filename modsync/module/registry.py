# modsync Registry Source
# Deploys versioned module archives from a registry directory

import shutil
import tarfile
import tempfile
from pathlib import Path
from typing import Optional

from modsync.errors import ModuleOperationError
from modsync.logger import get_logger
from modsync.module.descriptor import ModuleDescriptor, ModuleStatus
from modsync.utils.paths import ensure_dir, safe_delete

logger = get_logger(__name__)

VERSION_MARKER = ".modsync.version"


class RegistrySource:
    """
    Module source backed by a directory of release archives.

    A module ``acme/stdlib`` at version ``4.1.0`` is read from
    ``<registry_directory>/acme-stdlib-4.1.0.tar.gz``. The installed version
    is recorded in a marker file inside the module directory.
    """

    def __init__(self, registry_directory: Optional[Path]):
        self.registry_directory = registry_directory

    def archive_path(self, module: ModuleDescriptor) -> Path:
        """Get the archive for a module's slug and version."""
        if self.registry_directory is None:
            raise ModuleOperationError(
                f"Module {module.name} needs a registry but no registry_directory is configured",
                module=module.name,
            )
        slug = module.origin.replace("/", "-")
        return self.registry_directory / f"{slug}-{module.desired_state}.tar.gz"

    def installed_version(self, path: Path) -> Optional[str]:
        """Read the version marker of an installed module."""
        marker = path / VERSION_MARKER
        if not marker.is_file():
            return None
        return marker.read_text(encoding="utf-8").strip() or None

    def status(self, module: ModuleDescriptor) -> ModuleStatus:
        path = module.full_path
        if not path.exists() and not path.is_symlink():
            return ModuleStatus.ABSENT
        if path.is_symlink() or not path.is_dir():
            return ModuleStatus.MISMATCHED
        version = self.installed_version(path)
        if version is None:
            return ModuleStatus.MISMATCHED
        if version != module.desired_state:
            return ModuleStatus.OUTDATED
        return ModuleStatus.INSYNC

    def fetch(self, module: ModuleDescriptor) -> None:
        archive = self.archive_path(module)
        if not archive.is_file():
            raise ModuleOperationError(
                f"Release {module.origin} {module.desired_state} not found: {archive}", module=module.name
            )

    def install(self, module: ModuleDescriptor) -> None:
        archive = self.archive_path(module)
        dest = module.full_path
        ensure_dir(dest.parent)

        with tempfile.TemporaryDirectory(dir=dest.parent, prefix=f".{module.name}.") as tmp:
            staging = Path(tmp) / "extract"
            try:
                with tarfile.open(archive, "r:*") as tar:
                    tar.extractall(staging, filter="data")
            except (tarfile.TarError, OSError) as e:
                raise ModuleOperationError(f"Could not unpack {archive}: {e}", module=module.name) from e

            # Release archives usually wrap their content in one top-level directory
            entries = list(staging.iterdir())
            root = entries[0] if len(entries) == 1 and entries[0].is_dir() else staging
            (root / VERSION_MARKER).write_text(module.desired_state + "\n", encoding="utf-8")

            safe_delete(dest, missing_ok=True)
            shutil.move(str(root), str(dest))

        logger.debug("Installed %s %s into %s", module.origin, module.desired_state, dest)
