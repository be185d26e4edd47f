"""Path computation for worktree locations. No filesystem access happens here."""

import os
import re
from pathlib import Path
from typing import Optional, Union

from git_worktree_keeper.constants import UNSAFE_FOLDER_CHARS

_UNSAFE_RE = re.compile(r"[" + re.escape(UNSAFE_FOLDER_CHARS) + r"\s]")


def sanitize_branch_name(name: str) -> str:
    """Turn a branch name into a folder name.

    Every unsafe character becomes "-" and leading/trailing dashes are dropped,
    so ``feature/user-auth`` becomes ``feature-user-auth``.
    """
    return _UNSAFE_RE.sub("-", name).strip("-")


def worktree_folder_name(branch: str, prefix: str = "") -> str:
    """Folder name a worktree for ``branch`` is created under."""
    return f"{prefix or ''}{sanitize_branch_name(branch)}"


def resolve_base_dir(
    configured: Optional[str],
    repo_root: Union[str, Path],
    home: Optional[Union[str, Path]] = None,
) -> Path:
    """Compute the directory new worktrees are created under.

    Args:
        configured: Configured base directory, may be empty or None
        repo_root: Main repository root
        home: Home directory used for "~" expansion (defaults to the user's)

    Returns:
        Absolute path of the base directory
    """
    repo_root = Path(repo_root)

    if not configured:
        return repo_root.parent / f"{repo_root.name}-worktrees"

    if configured.startswith("~"):
        if configured == "~" or configured.startswith("~/"):
            home_dir = Path(home) if home is not None else Path.home()
            return Path(os.path.normpath(str(home_dir) + configured[1:]))
        # ~user form
        return Path(os.path.expanduser(configured))

    path = Path(configured)
    if path.is_absolute():
        return path

    return Path(os.path.normpath(repo_root / path))
