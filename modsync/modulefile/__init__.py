# modsync Modulefile Module
# Module list loading and lifecycle

from modsync.modulefile.loader import LoadResult, ModulefileLoader
from modsync.modulefile.modulefile import Modulefile
from modsync.modulefile.override import UNSET, Given, Override, Unset

__all__ = [
    "Modulefile",
    "ModulefileLoader",
    "LoadResult",
    "UNSET",
    "Unset",
    "Given",
    "Override",
]
