"""modsync - declarative module deployment.

Deploys the modules listed in a Modulefile into directories under a base
tree, from git remotes, a registry directory or local paths, and computes
which paths a purge must keep.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "Modulefile",
    "ModuleDescriptor",
    "ModuleStatus",
    "PurgeCoordinator",
    "BatchResult",
    "Sync",
    "Visit",
    "apply",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name == "Modulefile":
        from modsync.modulefile import Modulefile

        return Modulefile
    if name in ("ModuleDescriptor", "ModuleStatus"):
        from modsync.module import descriptor

        return getattr(descriptor, name)
    if name == "PurgeCoordinator":
        from modsync.purge import PurgeCoordinator

        return PurgeCoordinator
    if name in ("BatchResult", "Sync", "Visit", "apply"):
        from modsync.sync import synchronizer

        return getattr(synchronizer, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
