# modsync Local Source
# Links modules from local directories into the install path

import os
from pathlib import Path

from modsync.errors import ModuleOperationError
from modsync.module.descriptor import ModuleDescriptor, ModuleStatus
from modsync.utils.paths import ensure_dir


class LocalSource:
    """Module source that symlinks an existing directory."""

    def status(self, module: ModuleDescriptor) -> ModuleStatus:
        path = module.full_path
        if not path.is_symlink():
            return ModuleStatus.ABSENT if not path.exists() else ModuleStatus.MISMATCHED
        target = Path(os.path.normpath(path.parent / os.readlink(path)))
        if target != Path(module.origin):
            return ModuleStatus.OUTDATED
        return ModuleStatus.INSYNC

    def fetch(self, module: ModuleDescriptor) -> None:
        if not Path(module.origin).is_dir():
            raise ModuleOperationError(f"Local module directory not found: {module.origin}", module=module.name)

    def install(self, module: ModuleDescriptor) -> None:
        path = module.full_path
        if path.is_symlink():
            path.unlink()
        ensure_dir(path.parent)
        path.symlink_to(module.origin, target_is_directory=True)
