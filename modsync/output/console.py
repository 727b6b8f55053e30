# modsync Console Output
# Rich-based console output for deploy, status and purge

from pathlib import Path
from typing import Optional

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table

from modsync.module.base import Module
from modsync.module.descriptor import ModuleStatus
from modsync.sync.synchronizer import BatchResult

STATUS_STYLES = {
    ModuleStatus.INSYNC: "green",
    ModuleStatus.OUTDATED: "yellow",
    ModuleStatus.ABSENT: "cyan",
    ModuleStatus.DIRTY: "red",
    ModuleStatus.MISMATCHED: "red",
}


class Console:
    """
    Console output manager using Rich.

    Provides formatted output for deployment operations.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True, console: Optional[RichConsole] = None):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output.
            console: Rich console to print to (created if not given).
        """
        self.verbose = verbose
        self._console = console or RichConsole(no_color=not colored)

    @property
    def rich(self) -> RichConsole:
        return self._console

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self._console.print(f"[red]Error:[/red] {message}")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self._console.print(f"[yellow]Warning:[/yellow] {message}")

    def print_success(self, message: str) -> None:
        """Print success message."""
        self._console.print(f"[green]{message}[/green]")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self._console.print(f"[blue]{message}[/blue]")

    def print_batch_result(self, result: BatchResult, *, title: str = "Deploy Result") -> None:
        """
        Print the summary of a sync or visitor batch.

        Args:
            result: Batch to summarize.
            title: Panel title.
        """
        if result.success:
            status = "[green]✓ All modules completed[/green]"
        else:
            status = "[red]✗ Some modules did not complete[/red]"

        lines = [
            status,
            "",
            f"  • Modules: [cyan]{result.total}[/cyan]",
            f"  • Succeeded: [green]{len(result.succeeded)}[/green]",
            f"  • Updated: [blue]{len(result.updated)}[/blue]",
            f"  • Failed: [red]{len(result.failed)}[/red]",
        ]

        if self.verbose and result.updated:
            lines.append("")
            lines.append("[bold]Updated:[/bold]")
            lines.extend(f"  • {name}" for name in sorted(result.updated))

        if result.failed:
            lines.append("")
            lines.append("[red]Failures:[/red]")
            lines.extend(f"  • {name}: {reason}" for name, reason in sorted(result.failed.items()))

        border = "green" if result.success else "red"
        self._console.print(Panel("\n".join(lines), title=title, border_style=border))

    def print_status(self, modules: list[Module], statuses: dict[str, ModuleStatus]) -> None:
        """Print one row per module with its on-disk status."""
        if not modules:
            self._console.print("[dim]No modules declared[/dim]")
            return

        table = Table(title="Module Status", show_header=True, header_style="bold")
        table.add_column("Module", style="cyan")
        table.add_column("Source")
        table.add_column("Wanted")
        table.add_column("Path", style="dim")
        table.add_column("Status", justify="center")

        for module in modules:
            descriptor = module.descriptor
            status = statuses.get(module.name)
            if status is None:
                status_text = "[red]error[/red]"
            else:
                style = STATUS_STYLES.get(status, "white")
                status_text = f"[{style}]{status.value}[/{style}]"
            table.add_row(
                module.name,
                f"{descriptor.source_kind.value} {descriptor.origin}",
                descriptor.desired_state,
                str(module.path),
                status_text,
            )

        self._console.print()
        self._console.print(table)
        self._console.print()

    def print_purge(self, removed: list[Path], *, dry_run: bool = False) -> None:
        """Print the paths a purge removed (or would remove)."""
        if not removed:
            self._console.print("[green]No unmanaged content found[/green]")
            return

        verb = "Would remove" if dry_run else "Removed"
        self._console.print(f"[bold]{verb} {len(removed)} unmanaged entries:[/bold]")
        for path in removed:
            self._console.print(f"  [red]✗[/red] {path}")
