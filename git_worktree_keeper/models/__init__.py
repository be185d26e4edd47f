"""Data models for git-worktree-keeper."""

from .worktree import BranchSource, BranchSourceMode, WorktreeRecord

__all__ = ["BranchSource", "BranchSourceMode", "WorktreeRecord"]
