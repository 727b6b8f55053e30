# modsync Synchronizer Tests
# Serial and concurrent application of sync and visitor operations

import logging
from pathlib import Path

import pytest

from modsync.errors import ModuleOperationError, SyncError
from modsync.module.base import Module
from modsync.sync.synchronizer import BatchResult, Sync, Visit, apply, serial_apply
from modsync.sync.visitors import StatusVisitor

from fakes import FakeSource


class RecordingVisitor:
    """Visitor that records the order modules are visited in."""

    def __init__(self, fail: set[str] | None = None):
        self.seen: list[str] = []
        self.fail = fail or set()

    def visit(self, module: Module) -> None:
        if module.name in self.fail:
            raise RuntimeError("boom")
        self.seen.append(module.name)


def _tree(root: Path) -> set[str]:
    """Relative paths of everything below root."""
    return {str(path.relative_to(root)) for path in root.rglob("*")}


class TestBatchResult:
    """Tests for BatchResult."""

    def test_empty_is_success(self):
        result = BatchResult()
        assert result.success
        assert result.total == 0
        result.raise_for_failures()

    def test_raise_for_failures_lists_modules(self):
        result = BatchResult()
        result.record_success("a", updated=True)
        result.record_failure("c", "network down")
        result.record_failure("b", "ref not found")

        with pytest.raises(SyncError) as exc_info:
            result.raise_for_failures()

        assert exc_info.value.message == "sync failed: modules b, c did not complete"
        assert exc_info.value.failures == {"b": "ref not found", "c": "network down"}
        assert exc_info.value.details() == ["b: ref not found", "c: network down"]


class TestApply:
    """Tests for apply()."""

    def test_empty_modules(self):
        result = apply(Sync(), [], 4)
        assert result.success
        assert result.succeeded == set()
        assert result.failed == {}

    @pytest.mark.parametrize("budget", [0, -1])
    def test_budget_must_be_positive(self, budget, make_modules, fake_source):
        with pytest.raises(ValueError):
            apply(Sync(), make_modules(["a"], fake_source), budget)

    def test_serial_keeps_declaration_order(self, make_modules, fake_source):
        names = ["zeta", "alpha", "mid", "beta"]
        visitor = RecordingVisitor()

        result = apply(Visit(visitor), make_modules(names, fake_source), 1)

        assert visitor.seen == names
        assert result.succeeded == set(names)

    def test_serial_sync_installs_in_order(self, make_modules, fake_source):
        names = ["c", "a", "b"]
        apply(Sync(), make_modules(names, fake_source), 1)
        assert fake_source.calls == names
        assert fake_source.max_in_flight == 1

    @pytest.mark.parametrize("budget", [1, 2, 4, 8])
    def test_every_module_exactly_once(self, budget, make_modules, fake_source):
        names = [f"mod{i}" for i in range(10)]
        result = apply(Sync(), make_modules(names, fake_source), budget)

        assert sorted(fake_source.calls) == sorted(names)
        assert result.succeeded == set(names)
        assert result.updated == set(names)
        assert result.failed == {}

    @pytest.mark.parametrize("budget", [1, 2, 4])
    def test_bounded_concurrency(self, budget, make_modules):
        source = FakeSource(delay=0.03)
        names = [f"mod{i}" for i in range(12)]

        apply(Sync(), make_modules(names, source), budget)

        assert 1 <= source.max_in_flight <= budget

    def test_partial_progress(self, base_dir, make_modules):
        source = FakeSource(fail={"two"})
        modules = make_modules(["one", "two", "three"], source)

        result = apply(Sync(), modules, 3)

        assert result.succeeded == {"one", "three"}
        assert set(result.failed) == {"two"}
        assert "cannot reach" in result.failed["two"]
        assert (base_dir / "modules" / "one" / "VERSION").is_file()
        assert (base_dir / "modules" / "three" / "VERSION").is_file()
        assert not (base_dir / "modules" / "two").exists()

    def test_failure_does_not_stop_serial_queue(self, make_modules):
        source = FakeSource(fail={"first"})
        result = apply(Sync(), make_modules(["first", "second"], source), 1)

        assert set(result.failed) == {"first"}
        assert result.succeeded == {"second"}
        assert source.calls == ["second"]

    def test_same_outcome_for_every_budget(self, temp_dir: Path, make_modules):
        names = ["a", "b", "broken", "c", "d"]
        outcomes = []

        for budget in (1, 2, 8):
            root = temp_dir / f"budget-{budget}"
            source = FakeSource(fail={"broken"}, delay=0.005)
            result = apply(Sync(), make_modules(names, source, install_path=root), budget)
            outcomes.append((result.succeeded, set(result.failed), result.updated, _tree(root)))

        assert outcomes[0] == outcomes[1] == outcomes[2]

    def test_insync_module_not_updated(self, make_modules, fake_source):
        modules = make_modules(["a", "b"], fake_source)
        apply(Sync(), modules, 2)

        result = apply(Sync(), modules, 2)

        assert result.succeeded == {"a", "b"}
        assert result.updated == set()

    def test_unexpected_exception_is_recorded(self, make_modules):
        class ExplodingSource(FakeSource):
            def install(self, module):
                raise OSError("disk full")

        result = apply(Sync(), make_modules(["a"], ExplodingSource()), 2)

        assert result.failed == {"a": "OSError: disk full"}

    def test_visitor_failures_collected(self, make_modules, fake_source):
        visitor = RecordingVisitor(fail={"b"})
        result = apply(Visit(visitor), make_modules(["a", "b", "c"], fake_source), 2)

        assert sorted(visitor.seen) == ["a", "c"]
        assert result.failed == {"b": "RuntimeError: boom"}

    def test_module_error_message_used_as_reason(self, make_modules):
        class PickySource(FakeSource):
            def fetch(self, module):
                raise ModuleOperationError("ref 'v9' not found", module=module.name)

        result = serial_apply(Sync(), make_modules(["a"], PickySource()), logging.getLogger("modsync.test"))
        assert result.failed == {"a": "ref 'v9' not found"}


class TestStatusVisitor:
    """Tests for StatusVisitor."""

    def test_collects_statuses(self, make_modules, fake_source):
        modules = make_modules(["a", "b"], fake_source)
        apply(Sync(), modules[:1], 1)

        visitor = StatusVisitor()
        result = apply(Visit(visitor), modules, 2)

        assert result.success
        assert visitor.statuses["a"].value == "insync"
        assert visitor.statuses["b"].value == "absent"
        assert visitor.pending() == ["b"]
        assert fake_source.calls == ["a"]
