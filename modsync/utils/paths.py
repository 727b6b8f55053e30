# modsync Path Utilities
# Path normalization and safe filesystem operations

import os
import shutil
from pathlib import Path


def expand_path(path: str | Path) -> Path:
    """
    Expand ~ and environment variables and make the path absolute.

    The result is lexically normalized (``..`` and duplicate separators
    collapsed) but symlinks are left alone, so paths compare equal to the
    ones written in the module list.

    Args:
        path: Path string or Path object.

    Returns:
        Expanded Path object.
    """
    path_str = str(path)
    # Expand ~ first, then environment variables
    path_str = os.path.expanduser(path_str)
    path_str = os.path.expandvars(path_str)
    return Path(os.path.abspath(path_str))


def clean_path(path: str | Path) -> Path:
    """Lexically normalize a path without touching the filesystem."""
    return Path(os.path.normpath(str(path)))


def is_within(path: Path, parent: Path) -> bool:
    """Check whether ``path`` equals or lies below ``parent``."""
    path = clean_path(path)
    parent = clean_path(parent)
    return path == parent or parent in path.parents


def ensure_dir(path: Path) -> Path:
    """
    Ensure directory exists, creating if necessary.

    Args:
        path: Directory path.

    Returns:
        The path that was ensured.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def safe_delete(path: Path, *, missing_ok: bool = False) -> bool:
    """
    Safely delete a file, symlink or directory.

    Symlinks are unlinked, never followed, so purging a linked module never
    touches the link target.

    Args:
        path: Path to delete.
        missing_ok: If True, don't raise error if path doesn't exist.

    Returns:
        True if something was deleted, False if path didn't exist.

    Raises:
        FileNotFoundError: If path doesn't exist and missing_ok is False.
    """
    if not path.exists() and not path.is_symlink():
        if missing_ok:
            return False
        raise FileNotFoundError(f"Path does not exist: {path}")

    if path.is_symlink() or not path.is_dir():
        path.unlink()
    else:
        shutil.rmtree(path)
    return True
