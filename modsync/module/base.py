# modsync Module Base
# Source capability protocol and the Module wrapper the synchronizer drives

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from modsync.errors import ModuleOperationError
from modsync.logger import get_logger
from modsync.module.descriptor import ModuleDescriptor, ModuleStatus
from modsync.utils.paths import safe_delete

logger = get_logger(__name__)


class ModuleSource(Protocol):
    """
    Capability set every source kind implements.

    Implementations must serialize writes to any cache they share between
    descriptors; the synchronizer calls them from several threads at once.
    """

    def status(self, module: ModuleDescriptor) -> ModuleStatus:
        ...

    def fetch(self, module: ModuleDescriptor) -> None:
        ...

    def install(self, module: ModuleDescriptor) -> None:
        ...


class Module:
    """A descriptor bound to the source that can deploy it."""

    def __init__(self, descriptor: ModuleDescriptor, source: ModuleSource):
        self.descriptor = descriptor
        self.source = source

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def path(self) -> Path:
        return self.descriptor.full_path

    def status(self) -> ModuleStatus:
        """Report the module's on-disk state."""
        return self.source.status(self.descriptor)

    def sync(self, force: bool = False) -> bool:
        """
        Bring the install path in line with the descriptor.

        Args:
            force: Replace mismatched content and overwrite local modifications.

        Returns:
            True if the module's files changed.

        Raises:
            ModuleOperationError: If the install path holds unmanaged content
                and force is not set.
        """
        force = force or self.descriptor.force
        status = self.status()

        if status == ModuleStatus.INSYNC:
            logger.debug("Module %s is up to date", self.name)
            return False

        if status == ModuleStatus.DIRTY and not force:
            logger.warning("Skipping %s: %s has local modifications (use force to overwrite)", self.name, self.path)
            return False

        if status == ModuleStatus.MISMATCHED:
            if not force:
                raise ModuleOperationError(
                    f"{self.path} exists but is not a {self.descriptor.source_kind.value} module; "
                    "use force to replace it",
                    module=self.name,
                )
            logger.info("Replacing mismatched content at %s", self.path)
            safe_delete(self.path)

        logger.info("Deploying module %s to %s", self.name, self.path)
        self.source.fetch(self.descriptor)
        self.source.install(self.descriptor)
        return True

    def __repr__(self) -> str:
        return f"Module({self.descriptor})"
