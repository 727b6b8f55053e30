# modsync Content Synchronizer
# Applies sync or visitor operations to modules, serially or on a worker pool

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional, Protocol, Union

from modsync.errors import ModsyncError, SyncError
from modsync.logger import get_logger
from modsync.module.base import Module

_logger = get_logger(__name__)


class ModuleVisitor(Protocol):
    """Read-only per-module operation; failure is signalled by raising."""

    def visit(self, module: Module) -> None:
        ...


@dataclass(frozen=True)
class Sync:
    """Deploy each module through its source."""

    force: bool = False


@dataclass(frozen=True)
class Visit:
    """Run a visitor against each module."""

    visitor: ModuleVisitor


Operation = Union[Sync, Visit]


@dataclass
class BatchResult:
    """Outcome of applying one operation to a set of modules."""

    succeeded: set[str] = field(default_factory=set)
    failed: dict[str, str] = field(default_factory=dict)
    updated: set[str] = field(default_factory=set)

    @property
    def success(self) -> bool:
        """Check if every module succeeded."""
        return not self.failed

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    def record_success(self, name: str, updated: bool = False) -> None:
        self.succeeded.add(name)
        if updated:
            self.updated.add(name)

    def record_failure(self, name: str, reason: str) -> None:
        self.failed[name] = reason

    def raise_for_failures(self) -> None:
        """
        Raise if any module failed.

        Raises:
            SyncError: Listing every failed module and its reason.
        """
        if self.failed:
            raise SyncError(self.failed)


def _describe(error: Exception) -> str:
    if isinstance(error, ModsyncError):
        return error.message
    return f"{type(error).__name__}: {error}"


def _run_one(operation: Operation, module: Module, logger: logging.Logger) -> tuple[bool, Optional[str]]:
    """
    Apply an operation to one module.

    Returns:
        Tuple of (updated, failure_reason). failure_reason is None on success.
    """
    try:
        if isinstance(operation, Sync):
            return module.sync(force=operation.force), None
        operation.visitor.visit(module)
        return False, None
    except Exception as e:
        reason = _describe(e)
        logger.warning("Module %s failed: %s", module.name, reason)
        logger.debug("Failure details for %s", module.name, exc_info=True)
        return False, reason


def serial_apply(operation: Operation, modules: Sequence[Module], logger: logging.Logger) -> BatchResult:
    """Apply an operation to modules one at a time, in order, on this thread."""
    result = BatchResult()
    for module in modules:
        updated, reason = _run_one(operation, module, logger)
        if reason is None:
            result.record_success(module.name, updated)
        else:
            result.record_failure(module.name, reason)
    return result


def concurrent_apply(
    operation: Operation,
    modules: Sequence[Module],
    pool_size: int,
    logger: logging.Logger,
) -> BatchResult:
    """
    Apply an operation using up to ``pool_size`` worker threads.

    Workers drain one shared queue, so each module is claimed exactly once
    and no more than ``pool_size`` operations run at the same time. A failed
    module does not stop the workers.
    """
    work: queue.Queue[Module] = queue.Queue()
    for module in modules:
        work.put(module)

    result = BatchResult()
    result_lock = threading.Lock()

    def worker() -> None:
        while True:
            try:
                module = work.get_nowait()
            except queue.Empty:
                return
            updated, reason = _run_one(operation, module, logger)
            with result_lock:
                if reason is None:
                    result.record_success(module.name, updated)
                else:
                    result.record_failure(module.name, reason)

    workers = [
        threading.Thread(target=worker, name=f"modsync-worker-{index}", daemon=True)
        for index in range(min(pool_size, len(modules)))
    ]
    logger.debug("Starting %d workers for %d modules", len(workers), len(modules))
    for thread in workers:
        thread.start()
    for thread in workers:
        thread.join()

    return result


def apply(
    operation: Operation,
    modules: Sequence[Module],
    budget: int,
    logger: Optional[logging.Logger] = None,
) -> BatchResult:
    """
    Apply an operation to every module exactly once.

    Args:
        operation: Sync() to deploy, or Visit(visitor) for a read-only pass.
        modules: Modules in declaration order.
        budget: Maximum operations in flight; 1 runs serially in order.
        logger: Logger for progress and failures.

    Returns:
        BatchResult in which every module is either succeeded or failed.

    Raises:
        ValueError: If budget is less than 1.
    """
    if budget < 1:
        raise ValueError(f"concurrency budget must be at least 1, got {budget}")

    logger = logger or _logger
    if budget == 1:
        result = serial_apply(operation, modules, logger)
    else:
        result = concurrent_apply(operation, modules, budget, logger)

    if result.failed:
        logger.error("%d of %d modules failed: %s", len(result.failed), result.total, ", ".join(sorted(result.failed)))
    return result
