# modsync Modulefile
# Load lifecycle of a module list and the operations run against it

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from modsync.config.schema import DeploySettings, SourceKind
from modsync.errors import LoadError
from modsync.logger import get_logger
from modsync.module import Module, ModuleSource, build_sources
from modsync.modulefile.loader import ModulefileLoader
from modsync.modulefile.override import UNSET, Given, Override
from modsync.purge.exclusions import PurgeCoordinator
from modsync.sync.synchronizer import BatchResult, ModuleVisitor, Sync, Visit, apply

logger = get_logger(__name__)


class Modulefile:
    """
    A module list deployed into one base directory.

    Loading is lazy: the file is read on the first load() (or on the first
    query that needs the module set) and again only on reload().
    """

    def __init__(
        self,
        settings: DeploySettings,
        *,
        scope: Optional[object] = None,
        sources: Optional[Mapping[SourceKind, ModuleSource]] = None,
    ):
        """
        Initialize a Modulefile.

        Args:
            settings: Deployment settings.
            scope: Optional enclosing scope (e.g. an environment) whose own
                desired contents are kept by purges.
            sources: Source per kind (built from settings if not provided).
        """
        self.settings = settings
        self.scope = scope
        self.force = settings.force
        self.reference_override = settings.reference_override
        self._sources = dict(sources) if sources is not None else build_sources(settings)

        self._loader = ModulefileLoader(
            settings.modulefile_path,
            settings.base_path,
            settings.install_path,
            reference_override=self.reference_override,
            force=self.force,
        )
        self._modules: list[Module] = []
        self._managed_content: dict[Path, set[str]] = {}
        self._moduledir: Path = settings.install_path
        self._loaded = False

        logger.info("Using Modulefile '%s'", settings.modulefile_path)

    @property
    def path(self) -> Path:
        return self.settings.modulefile_path

    @property
    def base_directory(self) -> Path:
        return self.settings.base_path

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def modules(self) -> list[Module]:
        return list(self._modules)

    @property
    def managed_content(self) -> dict[Path, set[str]]:
        return self._managed_content

    @property
    def moduledir(self) -> Path:
        return self._moduledir

    def load(self, override: Override = UNSET) -> bool:
        """Load the module list unless it is already loaded."""
        if self._loaded:
            return True
        return self.reload(override)

    def reload(self, override: Override = UNSET) -> bool:
        """
        Read the module list again and replace the module set.

        Args:
            override: Given(value) to change the reference override for this
                and later loads. A value different from the configured one
                logs a warning and wins.

        Raises:
            LoadError: If the module list cannot be read; the previous module
                set and reference override are kept.
        """
        previous = self.reference_override
        if isinstance(override, Given) and override.value != previous:
            logger.warning(
                "Mismatch between passed and configured reference override (%r != %r), preferring passed value",
                override.value,
                previous,
            )
            self._loader.reference_override = override.value

        try:
            result = self._loader.load()
        except LoadError:
            self._loader.reference_override = previous
            raise

        self.reference_override = self._loader.reference_override
        self._modules = [Module(descriptor, self._sources[descriptor.source_kind]) for descriptor in result.modules]
        self._managed_content = result.managed_content
        self._moduledir = result.moduledir or self.settings.install_path
        self._loaded = True
        return True

    def desired_contents(self) -> list[Path]:
        """Full paths of all managed modules."""
        return self.purge_coordinator().desired_contents()

    def purge_coordinator(self) -> PurgeCoordinator:
        """Exclusion calculator over this module list."""
        return PurgeCoordinator(self, self.base_directory, scope=self.scope)

    def sync(self, budget: Optional[int] = None) -> BatchResult:
        """
        Deploy every module.

        Args:
            budget: Concurrency budget (defaults to the configured one).
        """
        self.load()
        return apply(Sync(force=self.force), self._modules, self._budget(budget), logger)

    def accept(self, visitor: ModuleVisitor, budget: Optional[int] = None) -> BatchResult:
        """Run a read-only visitor over every module."""
        self.load()
        return apply(Visit(visitor), self._modules, self._budget(budget), logger)

    def _budget(self, budget: Optional[int]) -> int:
        return budget if budget is not None else self.settings.concurrency_budget
