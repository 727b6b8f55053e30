# modsync Module Descriptor
# Immutable description of one module to deploy

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from modsync.config.schema import SourceKind


class ModuleStatus(str, Enum):
    """On-disk state of a module compared with its descriptor."""

    ABSENT = "absent"  # Nothing at the install path
    MISMATCHED = "mismatched"  # Something else occupies the install path
    OUTDATED = "outdated"  # Managed content at the wrong version
    DIRTY = "dirty"  # Managed content with local modifications
    INSYNC = "insync"


@dataclass(frozen=True)
class ModuleDescriptor:
    """
    One declared unit to install.

    Produced by the loader for a load cycle and never modified afterwards.
    ``desired_state`` is a git ref, a registry version or a local path,
    depending on ``source_kind``.
    """

    name: str
    install_path: Path
    source_kind: SourceKind
    desired_state: str
    origin: str
    force: bool = False
    options: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def full_path(self) -> Path:
        """Directory the module is deployed to."""
        return self.install_path / self.name

    def __str__(self) -> str:
        return f"{self.name} ({self.source_kind.value} {self.origin}@{self.desired_state})"
