# modsync Sync Module
# Synchronization engine and visitors

from modsync.sync.synchronizer import (
    BatchResult,
    ModuleVisitor,
    Operation,
    Sync,
    Visit,
    apply,
    concurrent_apply,
    serial_apply,
)
from modsync.sync.visitors import StatusVisitor

__all__ = [
    # Engine
    "apply",
    "serial_apply",
    "concurrent_apply",
    "BatchResult",
    "Operation",
    "Sync",
    "Visit",
    "ModuleVisitor",
    # Visitors
    "StatusVisitor",
]
