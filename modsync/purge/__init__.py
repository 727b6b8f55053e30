# modsync Purge Module
# Exclusion calculation and the sweep that consumes it

from modsync.purge.exclusions import (
    DesiredContentsProvider,
    ManagedContentProvider,
    PurgeCoordinator,
)
from modsync.purge.sweep import PurgeSweep

__all__ = [
    "DesiredContentsProvider",
    "ManagedContentProvider",
    "PurgeCoordinator",
    "PurgeSweep",
]
