# modsync Reference Override
# Tri-state argument: omitted, or given (possibly as None)

from dataclasses import dataclass
from typing import Optional, Union


class Unset:
    """Marker type for an omitted override argument."""

    def __repr__(self) -> str:
        return "UNSET"


@dataclass(frozen=True)
class Given:
    """An override passed explicitly by the caller; ``value`` may be None."""

    value: Optional[str]


Override = Union[Unset, Given]

UNSET = Unset()
