# modsync Git Module
# Git operations for module mirrors and working copies

from modsync.git.operations import (
    checkout_detached,
    clean_untracked,
    clone_from_mirror,
    fetch_from,
    get_remote_url,
    has_uncommitted_changes,
    head_commit,
    is_fixed_ref,
    is_git_repo,
    mirror_clone,
    mirror_update,
    resolve_ref,
)

__all__ = [
    "is_git_repo",
    "is_fixed_ref",
    "mirror_clone",
    "mirror_update",
    "clone_from_mirror",
    "fetch_from",
    "resolve_ref",
    "head_commit",
    "checkout_detached",
    "clean_untracked",
    "get_remote_url",
    "has_uncommitted_changes",
]
