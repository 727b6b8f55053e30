# modsync Purge Exclusions
# Paths a purge sweep must keep, derived from managed content

from collections.abc import Mapping
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from modsync.utils.paths import clean_path


@runtime_checkable
class DesiredContentsProvider(Protocol):
    """Anything that can list the full paths it wants to keep."""

    def desired_contents(self) -> list[Path]:
        ...


class ManagedContentProvider(Protocol):
    """Source of the install-directory to module-names mapping."""

    @property
    def managed_content(self) -> Mapping[Path, set[str]]:
        ...

    def load(self) -> bool:
        ...


class PurgeCoordinator:
    """
    Computes which paths are safe from purging.

    Holds a content provider instead of extending it. Every query loads the
    provider first if it has not been loaded yet. Nothing here touches the
    filesystem.
    """

    def __init__(
        self,
        provider: ManagedContentProvider,
        base_directory: Path,
        scope: Optional[object] = None,
    ):
        self.provider = provider
        self.base_directory = clean_path(base_directory)
        self.scope = scope

    def managed_directories(self) -> set[Path]:
        """Install directories that hold managed modules, minus the base directory."""
        self.provider.load()
        dirs = {clean_path(directory) for directory in self.provider.managed_content}
        dirs.discard(self.base_directory)
        return dirs

    def desired_contents(self) -> list[Path]:
        """Full path of every managed module."""
        self.provider.load()
        return [
            clean_path(Path(install_path) / name)
            for install_path, names in self.provider.managed_content.items()
            for name in sorted(names)
        ]

    def purge_exclusions(self) -> set[Path]:
        """
        Paths a purge sweep must never delete.

        The enclosing scope contributes its own desired contents when it
        provides them; a scope without that capability adds nothing.
        """
        exclusions = self.managed_directories()
        exclusions.update(self.desired_contents())

        if isinstance(self.scope, DesiredContentsProvider):
            exclusions.update(clean_path(path) for path in self.scope.desired_contents())

        return exclusions
