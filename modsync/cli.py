"""Click-based CLI for modsync - declarative module deployment."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from modsync import __version__
from modsync.config import (
    DeploySettings,
    get_config_path,
    load_settings,
    validate_settings_file,
    write_default_settings,
)
from modsync.errors import LoadError, ModsyncError, SyncError
from modsync.logger import setup_logging
from modsync.modulefile import UNSET, Given, Modulefile
from modsync.output import Console
from modsync.purge import PurgeSweep
from modsync.sync import StatusVisitor
from modsync.utils.paths import expand_path

EMPTY_MODULEFILE = """# Modules deployed into this directory
# moduledir: modules
modules: []
"""


def _settings(ctx: click.Context, console: Console, **overrides) -> DeploySettings:
    """Load settings for a command or exit with an error."""
    config_path: Optional[Path] = ctx.obj.get("config_path")
    try:
        settings = load_settings(config_path, **overrides)
    except FileNotFoundError as e:
        console.print_error(str(e))
        sys.exit(1)
    except ValidationError as e:
        console.print_error(f"Invalid settings: {e}")
        sys.exit(1)

    level = "DEBUG" if ctx.obj.get("verbose") else settings.log_level
    setup_logging(level)
    return settings


def _load_modulefile(modulefile: Modulefile, console: Console, override: Optional[str] = None) -> None:
    """Load the module list or exit with an error."""
    try:
        if override is not None:
            modulefile.reload(Given(override))
        else:
            modulefile.load(UNSET)
    except LoadError as e:
        console.print_error(e.message)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="modsync")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Settings file (default: $MODSYNC_CONFIG or ~/.config/modsync/config.yaml)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool) -> None:
    """modsync - deploy declared modules into a directory tree.

    \b
    Reads Modulefile.yaml from the base directory, fetches every module
    from git, a registry directory or a local path, and keeps the
    install directories in sync with the declaration.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("base_directory", type=click.Path(file_okay=False, path_type=Path))
@click.pass_context
def init(ctx: click.Context, base_directory: Path) -> None:
    """Create a settings file and an empty Modulefile for BASE_DIRECTORY."""
    console = Console(verbose=ctx.obj["verbose"])
    base = expand_path(base_directory)

    config_path, created = write_default_settings(str(base), ctx.obj.get("config_path"))
    if created:
        console.print_success(f"Created settings: {config_path}")
    else:
        console.print_info(f"Settings already exist: {config_path}")

    base.mkdir(parents=True, exist_ok=True)
    modulefile = base / "Modulefile.yaml"
    if not modulefile.exists():
        modulefile.write_text(EMPTY_MODULEFILE, encoding="utf-8")
        console.print_success(f"Created Modulefile: {modulefile}")


@cli.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite local changes and mismatched content")
@click.option("--budget", "-j", type=click.IntRange(min=1), help="Maximum modules deployed at once (1 = serial)")
@click.option("--override", "-r", help="Ref used by git modules that do not pin one")
@click.option("--purge/--no-purge", default=False, help="Remove unmanaged content after deploying")
@click.pass_context
def deploy(
    ctx: click.Context,
    force: bool,
    budget: Optional[int],
    override: Optional[str],
    purge: bool,
) -> None:
    """Deploy every module in the Modulefile.

    Every module is attempted even when others fail; the command exits
    non-zero if any module did not complete.
    """
    console = Console(verbose=ctx.obj["verbose"])
    settings = _settings(ctx, console, force=force or None, concurrency_budget=budget)

    modulefile = Modulefile(settings)
    _load_modulefile(modulefile, console, override)

    result = modulefile.sync()
    console.print_batch_result(result)

    if purge:
        try:
            removed = PurgeSweep(modulefile.purge_coordinator()).purge()
        except (ModsyncError, OSError) as e:
            console.print_error(str(e))
            sys.exit(1)
        console.print_purge(removed)

    try:
        result.raise_for_failures()
    except SyncError as e:
        console.print_error(e.message)
        sys.exit(1)


@cli.command()
@click.option("--budget", "-j", type=click.IntRange(min=1), help="Maximum modules inspected at once")
@click.pass_context
def status(ctx: click.Context, budget: Optional[int]) -> None:
    """Show the deployment status of every module without changing anything."""
    console = Console(verbose=ctx.obj["verbose"])
    settings = _settings(ctx, console, concurrency_budget=budget)

    modulefile = Modulefile(settings)
    _load_modulefile(modulefile, console)

    visitor = StatusVisitor()
    result = modulefile.accept(visitor)
    console.print_status(modulefile.modules, visitor.statuses)

    pending = visitor.pending()
    if pending:
        console.print_info(f"{len(pending)} module(s) would change on deploy: {', '.join(pending)}")
    else:
        console.print_success("All modules are in sync")

    if not result.success:
        for name, reason in sorted(result.failed.items()):
            console.print_error(f"{name}: {reason}")
        sys.exit(1)


@cli.command()
@click.option("--dry-run", "-n", is_flag=True, help="Only list what would be removed")
@click.option("--recurse", is_flag=True, help="Also look inside unmanaged subdirectories")
@click.pass_context
def purge(ctx: click.Context, dry_run: bool, recurse: bool) -> None:
    """Remove content of the install directories that no module declares."""
    console = Console(verbose=ctx.obj["verbose"])
    settings = _settings(ctx, console)

    modulefile = Modulefile(settings)
    _load_modulefile(modulefile, console)

    try:
        removed = PurgeSweep(modulefile.purge_coordinator(), recurse=recurse).purge(dry_run=dry_run)
    except (ModsyncError, OSError) as e:
        console.print_error(str(e))
        sys.exit(1)
    console.print_purge(removed, dry_run=dry_run)


@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Validate the settings file and the Modulefile."""
    console = Console(verbose=ctx.obj["verbose"])
    config_path = ctx.obj.get("config_path") or get_config_path()

    valid, errors = validate_settings_file(config_path)
    if not valid:
        console.print_error(f"Settings file {config_path} has errors:")
        for error in errors:
            console.print(f"  • {error}")
        sys.exit(1)
    console.print_success(f"Settings file {config_path} is valid")

    settings = _settings(ctx, console)
    modulefile = Modulefile(settings)
    _load_modulefile(modulefile, console)
    console.print_success(f"Modulefile {modulefile.path} is valid ({len(modulefile.modules)} modules)")
