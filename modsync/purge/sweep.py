# modsync Purge Sweep
# Remove unmanaged content from managed directories

import os
from collections.abc import Iterable
from pathlib import Path

from modsync.logger import get_logger
from modsync.purge.exclusions import PurgeCoordinator
from modsync.utils.paths import clean_path, safe_delete

logger = get_logger(__name__)


class PurgeSweep:
    """
    Deletes entries of the managed directories that nothing declares.

    An entry survives if it is excluded, lies inside a module or scope path,
    or contains one. With ``recurse`` the sweep also descends into directories
    that are not excluded themselves.
    """

    def __init__(self, coordinator: PurgeCoordinator, *, recurse: bool = False):
        self.coordinator = coordinator
        self.recurse = recurse

    def current_contents(self, directories: Iterable[Path]) -> list[Path]:
        """List entries of the given directories (depth first when recursing)."""
        contents: list[Path] = []
        for directory in sorted(directories):
            if not directory.is_dir() or directory.is_symlink():
                continue
            contents.extend(self._walk(directory))
        return contents

    def _walk(self, directory: Path) -> list[Path]:
        found: list[Path] = []
        for entry in sorted(os.scandir(directory), key=lambda e: e.name):
            path = clean_path(entry.path)
            found.append(path)
            if self.recurse and entry.is_dir(follow_symlinks=False):
                found.extend(self._walk(path))
        return found

    def stale_contents(self) -> list[Path]:
        """Entries that would be removed by purge()."""
        exclusions = self.coordinator.purge_exclusions()
        directories = self.coordinator.managed_directories()
        # Everything listed lies inside a managed directory, so only module
        # and scope paths protect their parents and children
        anchors = exclusions - directories

        stale: list[Path] = []
        for path in self.current_contents(directories):
            if _is_protected(path, exclusions, anchors):
                continue
            # Anything inside an already-stale directory goes with it
            if any(parent in stale for parent in path.parents):
                continue
            stale.append(path)
        return stale

    def purge(self, *, dry_run: bool = False) -> list[Path]:
        """
        Remove stale content.

        Args:
            dry_run: If True, only report what would be removed.

        Returns:
            Paths removed (or that would be removed).
        """
        stale = self.stale_contents()
        for path in stale:
            if dry_run:
                logger.info("Would remove unmanaged content %s", path)
                continue
            logger.info("Removing unmanaged content %s", path)
            safe_delete(path, missing_ok=True)
        return stale


def _is_protected(path: Path, exclusions: set[Path], anchors: set[Path]) -> bool:
    if path in exclusions:
        return True
    # Inside a kept module or scope path
    if any(parent in anchors for parent in path.parents):
        return True
    # Ancestor of a kept module or scope path
    return any(path in anchor.parents for anchor in anchors)
