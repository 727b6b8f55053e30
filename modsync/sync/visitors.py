# modsync Visitors
# Read-only passes over modules

import threading

from modsync.module.base import Module
from modsync.module.descriptor import ModuleStatus


class StatusVisitor:
    """Collect each module's on-disk status."""

    def __init__(self) -> None:
        self.statuses: dict[str, ModuleStatus] = {}
        self._lock = threading.Lock()

    def visit(self, module: Module) -> None:
        status = module.status()
        with self._lock:
            self.statuses[module.name] = status

    def pending(self) -> list[str]:
        """Names of modules a sync would touch, sorted."""
        return sorted(name for name, status in self.statuses.items() if status != ModuleStatus.INSYNC)
