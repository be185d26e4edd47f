"""Worktree data models."""

from dataclasses import dataclass
from enum import Enum

from git_worktree_keeper.constants import DETACHED_LABEL


@dataclass(frozen=True)
class WorktreeRecord:
    """One worktree registered with the repository."""

    is_main: bool  # Is this the main working tree?
    path: str
    branch: str  # Empty when HEAD is detached

    def to_porcelain(self) -> str:
        """Tab-separated main-flag, path and branch."""
        return f"{int(self.is_main)}\t{self.path}\t{self.branch}"

    def __str__(self) -> str:
        main_marker = " (main)" if self.is_main else ""
        return f"{self.branch or DETACHED_LABEL} @ {self.path}{main_marker}"


class BranchSourceMode(Enum):
    """Where the branch of a new worktree comes from."""
    REMOTE = "remote"  # Track an existing remote-tracking branch
    LOCAL = "local"  # Reuse an existing local branch
    NEW = "new"  # Create a fresh branch


@dataclass(frozen=True)
class BranchSource:
    """Branch-sourcing decision for a new worktree."""

    mode: BranchSourceMode
    ref: str  # Remote ref, local branch or start point, depending on mode
