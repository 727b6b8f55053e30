# modsync Module Package
# Module descriptors and the sources that deploy them

from modsync.config.schema import DeploySettings, SourceKind
from modsync.module.base import Module, ModuleSource
from modsync.module.descriptor import ModuleDescriptor, ModuleStatus
from modsync.module.git import GitSource
from modsync.module.local import LocalSource
from modsync.module.registry import RegistrySource


def build_sources(settings: DeploySettings) -> dict[SourceKind, ModuleSource]:
    """Create one source per kind, shared by every module of that kind."""
    return {
        SourceKind.VCS: GitSource(settings.cache_path),
        SourceKind.REGISTRY: RegistrySource(settings.registry_path),
        SourceKind.LOCAL: LocalSource(),
    }


__all__ = [
    "ModuleDescriptor",
    "ModuleStatus",
    "Module",
    "ModuleSource",
    "GitSource",
    "RegistrySource",
    "LocalSource",
    "build_sources",
]
