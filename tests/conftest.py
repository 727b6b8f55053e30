# modsync Test Fixtures
# Pytest fixtures for modsync tests

import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
import yaml

from modsync.config.schema import DeploySettings, SourceKind
from modsync.module.base import Module
from modsync.module.descriptor import ModuleDescriptor

from fakes import FakeSource


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def base_dir(temp_dir: Path) -> Path:
    """Create a deployment base directory."""
    base = temp_dir / "base"
    base.mkdir()
    return base


@pytest.fixture
def settings(base_dir: Path, temp_dir: Path) -> DeploySettings:
    """Settings for the base directory with a private cache."""
    return DeploySettings(
        base_directory=str(base_dir),
        cache_directory=str(temp_dir / "cache"),
        concurrency_budget=1,
    )


@pytest.fixture
def write_modulefile(base_dir: Path) -> Callable[..., Path]:
    """Return a helper that writes Modulefile.yaml into the base directory."""

    def _write(modules: list[dict], **extra) -> Path:
        path = base_dir / "Modulefile.yaml"
        data = {"modules": modules, **extra}
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False)
        return path

    return _write


@pytest.fixture
def fake_source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def make_modules(base_dir: Path) -> Callable[..., list[Module]]:
    """Return a helper building modules bound to a source under base/modules."""

    def _make(names: list[str], source, *, install_path: Path | None = None) -> list[Module]:
        target = install_path or base_dir / "modules"
        return [
            Module(
                ModuleDescriptor(
                    name=name,
                    install_path=target,
                    source_kind=SourceKind.VCS,
                    desired_state="1.0.0",
                    origin=f"https://example.com/{name}.git",
                ),
                source,
            )
            for name in names
        ]

    return _make


@pytest.fixture
def config_file(temp_dir: Path, base_dir: Path) -> Path:
    """Create a settings file for the base directory."""
    path = temp_dir / "config.yaml"
    data = {
        "base_directory": str(base_dir),
        "cache_directory": str(temp_dir / "cache"),
        "concurrency_budget": 2,
    }
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False)
    return path
