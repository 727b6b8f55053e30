# Tests for modsync.output.console
# Rich-based console output

from io import StringIO
from pathlib import Path

from rich.console import Console as RichConsole

from modsync.config.schema import SourceKind
from modsync.module.base import Module
from modsync.module.descriptor import ModuleDescriptor, ModuleStatus
from modsync.output.console import Console
from modsync.sync.synchronizer import BatchResult

from fakes import FakeSource


def _make_console(verbose: bool = False) -> Console:
    """Create a console with captured output."""
    return Console(verbose=verbose, colored=False, console=RichConsole(file=StringIO(), no_color=True, width=200))


def _get_output(console: Console) -> str:
    """Get captured output from console."""
    console.rich.file.seek(0)
    return console.rich.file.read()


class TestConsoleBasic:
    """Tests for basic console methods."""

    def test_print_error(self):
        c = _make_console()
        c.print_error("something failed")
        output = _get_output(c)
        assert "Error:" in output
        assert "something failed" in output

    def test_print_warning(self):
        c = _make_console()
        c.print_warning("be careful")
        assert "Warning: be careful" in _get_output(c)


class TestBatchResult:
    """Tests for batch summaries."""

    def test_success(self):
        c = _make_console()
        result = BatchResult()
        result.record_success("a", updated=True)
        c.print_batch_result(result)

        output = _get_output(c)
        assert "All modules completed" in output
        assert "Failures" not in output

    def test_failures_listed(self):
        c = _make_console()
        result = BatchResult()
        result.record_success("a", updated=False)
        result.record_failure("b", "ref 'v9' not found")
        c.print_batch_result(result)

        output = _get_output(c)
        assert "Some modules did not complete" in output
        assert "b: ref 'v9' not found" in output

    def test_verbose_lists_updates(self):
        c = _make_console(verbose=True)
        result = BatchResult()
        result.record_success("apache", updated=True)
        c.print_batch_result(result)

        assert "apache" in _get_output(c)


class TestStatusAndPurge:
    """Tests for the status table and purge listing."""

    def test_status_table(self):
        c = _make_console()
        module = Module(
            ModuleDescriptor(
                name="apache",
                install_path=Path("/base/modules"),
                source_kind=SourceKind.VCS,
                desired_state="v1.2.0",
                origin="https://example.com/apache.git",
            ),
            FakeSource(),
        )
        c.print_status([module], {"apache": ModuleStatus.OUTDATED})

        output = _get_output(c)
        assert "apache" in output
        assert "v1.2.0" in output
        assert "outdated" in output

    def test_no_modules(self):
        c = _make_console()
        c.print_status([], {})
        assert "No modules declared" in _get_output(c)

    def test_purge_dry_run(self):
        c = _make_console()
        c.print_purge([Path("/base/modules/stray")], dry_run=True)

        output = _get_output(c)
        assert "Would remove 1 unmanaged entries" in output
        assert "/base/modules/stray" in output

    def test_purge_nothing(self):
        c = _make_console()
        c.print_purge([])
        assert "No unmanaged content found" in _get_output(c)
