# modsync Git Source
# Deploys modules from git remotes through shared bare mirrors

import re
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from modsync import git
from modsync.errors import GitError, ModuleOperationError
from modsync.logger import get_logger
from modsync.module.descriptor import ModuleDescriptor, ModuleStatus

logger = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class GitSource:
    """
    Module source backed by git.

    Every origin gets one bare mirror under the cache directory. Modules
    that share an origin share the mirror, so all work touching a mirror
    runs under that mirror's lock.
    """

    def __init__(self, cache_directory: Path):
        self.cache_directory = cache_directory
        self._locks: dict[Path, threading.Lock] = {}
        self._guard = threading.Lock()

    def mirror_path(self, module: ModuleDescriptor) -> Path:
        """Get the mirror directory for a module's origin."""
        name = _UNSAFE_CHARS.sub("-", module.origin).strip("-")
        return self.cache_directory / "git" / name

    @contextmanager
    def _locked(self, mirror: Path) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(mirror, threading.Lock())
        with lock:
            yield

    def status(self, module: ModuleDescriptor) -> ModuleStatus:
        path = module.full_path
        if not path.exists() and not path.is_symlink():
            return ModuleStatus.ABSENT
        if path.is_symlink() or not git.is_git_repo(path):
            return ModuleStatus.MISMATCHED
        if git.get_remote_url(path) != module.origin:
            return ModuleStatus.MISMATCHED
        if git.has_uncommitted_changes(path):
            return ModuleStatus.DIRTY

        if not git.is_fixed_ref(path, module.desired_state):
            # Branches move upstream; always refresh them
            return ModuleStatus.OUTDATED
        expected = git.resolve_ref(path, module.desired_state)
        if expected is None or git.head_commit(path) != expected:
            return ModuleStatus.OUTDATED
        return ModuleStatus.INSYNC

    def fetch(self, module: ModuleDescriptor) -> None:
        mirror = self.mirror_path(module)
        with self._locked(mirror):
            try:
                if mirror.exists():
                    logger.debug("Updating mirror %s", mirror)
                    git.mirror_update(mirror)
                else:
                    logger.debug("Creating mirror of %s at %s", module.origin, mirror)
                    git.mirror_clone(module.origin, mirror)
            except GitError as e:
                raise ModuleOperationError(f"Could not fetch {module.origin}: {e.message}", module=module.name) from e

    def install(self, module: ModuleDescriptor) -> None:
        mirror = self.mirror_path(module)
        path = module.full_path
        with self._locked(mirror):
            try:
                if git.is_git_repo(path):
                    git.fetch_from(path, mirror)
                else:
                    git.clone_from_mirror(mirror, path, url=module.origin)
                commit = git.resolve_ref(path, module.desired_state)
                if commit is None:
                    raise ModuleOperationError(
                        f"Ref '{module.desired_state}' not found in {module.origin}", module=module.name
                    )
                git.checkout_detached(path, commit)
                # Untracked files would leave the module dirty
                git.clean_untracked(path)
            except GitError as e:
                raise ModuleOperationError(f"Could not install {module.name}: {e.message}", module=module.name) from e
