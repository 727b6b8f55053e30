# modsync Utilities Module
# Helper functions for path handling

from modsync.utils.paths import (
    clean_path,
    ensure_dir,
    expand_path,
    is_within,
    safe_delete,
)

__all__ = [
    "expand_path",
    "clean_path",
    "is_within",
    "ensure_dir",
    "safe_delete",
]
