# modsync Errors
# Exception hierarchy shared by loader, sources and synchronizer

from pathlib import Path
from typing import Optional


class ModsyncError(Exception):
    """Base class for all modsync errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class LoadError(ModsyncError):
    """The module list could not be read or is malformed."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)


class ModuleOperationError(ModsyncError):
    """A single module's fetch, install or visit failed."""

    def __init__(self, message: str, module: str = ""):
        self.module = module
        super().__init__(message)


class SyncError(ModsyncError):
    """
    Aggregate failure of a batch.

    Raised after every module has been attempted; modules that succeeded
    stay installed.
    """

    def __init__(self, failures: dict[str, str]):
        self.failures = dict(failures)
        names = ", ".join(sorted(self.failures))
        super().__init__(f"sync failed: modules {names} did not complete")

    def details(self) -> list[str]:
        """Return one 'module: reason' line per failed module."""
        return [f"{name}: {reason}" for name, reason in sorted(self.failures.items())]


class GitError(ModsyncError):
    """Exception raised for git operation errors."""

    def __init__(self, message: str, returncode: int = 1, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)
