# modsync Git Operations
# Git command execution for mirrors and module working copies

import re
import subprocess
from pathlib import Path
from typing import Optional

from modsync.errors import GitError

COMMIT_RE = re.compile(r"^[0-9a-f]{7,40}$")


def _run_git(
    *args: str,
    cwd: Optional[Path] = None,
    check: bool = True,
    capture_output: bool = True,
) -> subprocess.CompletedProcess[str]:
    """
    Run a git command.

    Args:
        *args: Git command arguments.
        cwd: Working directory.
        check: Whether to raise on non-zero exit.
        capture_output: Whether to capture stdout/stderr.

    Returns:
        CompletedProcess with result.

    Raises:
        GitError: If command fails and check is True.
    """
    cmd = ["git", *args]
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            check=False,
            capture_output=capture_output,
            text=True,
        )
    except FileNotFoundError:
        raise GitError("git command not found. Is git installed?")

    if check and result.returncode != 0:
        stderr = result.stderr.strip() if result.stderr else ""
        message = f"Git command failed: {' '.join(cmd)}"
        if stderr:
            message = f"{message}: {stderr}"
        raise GitError(message, returncode=result.returncode, stderr=stderr)
    return result


def is_git_repo(path: Path) -> bool:
    """
    Check if path is the top of a git working copy.

    Args:
        path: Path to check.

    Returns:
        True if path contains a .git entry.
    """
    return (path / ".git").exists()


def mirror_clone(url: str, dest: Path) -> None:
    """
    Create a bare mirror of a remote.

    Args:
        url: Repository URL.
        dest: Mirror directory.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    _run_git("clone", "--mirror", url, str(dest))


def mirror_update(mirror: Path) -> None:
    """Refresh every ref of a bare mirror, dropping deleted ones."""
    _run_git("remote", "update", "--prune", cwd=mirror)


def clone_from_mirror(mirror: Path, dest: Path, *, url: Optional[str] = None) -> None:
    """
    Clone a working copy using a local mirror as the object source.

    Args:
        mirror: Bare mirror directory.
        dest: Destination directory.
        url: Upstream URL recorded as origin (defaults to the mirror).
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    _run_git("clone", "--no-checkout", str(mirror), str(dest))
    if url:
        _run_git("remote", "set-url", "origin", url, cwd=dest)


def fetch_from(path: Path, source: Path) -> None:
    """Fetch all branches and tags of ``source`` into the working copy's origin refs."""
    _run_git(
        "fetch",
        "--tags",
        "--force",
        str(source),
        "+refs/heads/*:refs/remotes/origin/*",
        cwd=path,
    )


def resolve_ref(path: Path, ref: str) -> Optional[str]:
    """
    Resolve a branch, tag or commit to a commit id.

    Branch names are looked up as remote-tracking branches first so a
    working copy always follows its origin.

    Args:
        path: Repository (working copy or bare mirror).
        ref: Reference to resolve.

    Returns:
        Full commit id, or None if the ref is unknown.
    """
    for candidate in (f"refs/remotes/origin/{ref}", f"refs/heads/{ref}", f"refs/tags/{ref}", ref):
        result = _run_git("rev-parse", "--verify", "--quiet", f"{candidate}^{{commit}}", cwd=path, check=False)
        if result.returncode == 0 and result.stdout.strip():
            return result.stdout.strip()
    return None


def head_commit(path: Path) -> Optional[str]:
    """Get the commit id checked out in a working copy."""
    result = _run_git("rev-parse", "--verify", "--quiet", "HEAD", cwd=path, check=False)
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def checkout_detached(path: Path, commit: str) -> None:
    """Check out a commit on a detached HEAD, discarding local changes."""
    _run_git("checkout", "--force", "--detach", commit, cwd=path)


def clean_untracked(path: Path) -> None:
    """Remove untracked and ignored files, including nested repositories."""
    _run_git("clean", "-ffdx", cwd=path)


def get_remote_url(path: Path, remote: str = "origin") -> Optional[str]:
    """Get the configured URL of a remote."""
    result = _run_git("remote", "get-url", remote, cwd=path, check=False)
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def has_uncommitted_changes(path: Path) -> bool:
    """
    Check if repository has uncommitted changes.

    Untracked files count as changes.

    Args:
        path: Repository path.

    Returns:
        True if there are uncommitted changes.
    """
    result = _run_git("status", "--porcelain", cwd=path)
    return len(result.stdout.strip()) > 0


def is_fixed_ref(path: Path, ref: str) -> bool:
    """
    Check whether a ref names a tag or a commit rather than a branch.

    Fixed refs never move, so a working copy already at them needs no fetch.
    """
    if _run_git("rev-parse", "--verify", "--quiet", f"refs/tags/{ref}", cwd=path, check=False).returncode == 0:
        return True
    if _run_git("rev-parse", "--verify", "--quiet", f"refs/remotes/origin/{ref}", cwd=path, check=False).returncode == 0:
        return False
    return COMMIT_RE.match(ref) is not None
