"""Worktree registry and creation service for git-worktree-keeper."""

import os
from typing import Any, Dict, List, Optional

import git

from git_worktree_keeper.context import ExecutionContext
from git_worktree_keeper.exceptions import WorktreeOperationError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.worktree import BranchSource, BranchSourceMode, WorktreeRecord
from git_worktree_keeper.services.git.operations import GitOperations, command_error_message

logger = get_logger(__name__)


class WorktreeService:
    """Service for managing git worktrees."""

    def __init__(self, context: ExecutionContext, git_ops: Optional[GitOperations] = None):
        """Initialize the worktree service.

        Args:
            context: Execution context of the main repository
            git_ops: Branch/remote queries (created from the context if omitted)
        """
        self.context = context
        self.git_ops = git_ops or GitOperations(context)

    def _get_repo(self) -> git.Repo:
        return self.context.repo()

    @staticmethod
    def parse_porcelain(output: str) -> List[WorktreeRecord]:
        """Parse ``git worktree list --porcelain`` output.

        Format:
            worktree /path/to/worktree
            HEAD commit_sha
            branch refs/heads/branch-name   (or "detached")
            (blank line between worktrees)

        The first entry is always the main working tree.
        """
        records: List[WorktreeRecord] = []
        current: Dict[str, Any] = {}

        def flush():
            if current.get("path"):
                records.append(
                    WorktreeRecord(
                        is_main=not records,
                        path=current["path"],
                        branch=current.get("branch", ""),
                    )
                )
            current.clear()

        for line in output.split("\n"):
            line = line.strip()

            if not line:
                # Empty line marks end of worktree entry
                flush()
                continue

            if line.startswith("worktree "):
                # Tolerate entries not separated by a blank line
                flush()
                current["path"] = line.split(" ", 1)[1]
            elif line.startswith("branch "):
                branch_ref = line.split(" ", 1)[1]
                if branch_ref.startswith("refs/heads/"):
                    current["branch"] = branch_ref[len("refs/heads/"):]
                else:
                    current["branch"] = ""
            elif line == "detached":
                current["branch"] = ""

        flush()
        return records

    def list_worktrees(self) -> List[WorktreeRecord]:
        """Get every worktree registered with the repository, main checkout first.

        Raises:
            WorktreeOperationError: If git cannot list worktrees
        """
        try:
            output = self._get_repo().git.worktree("list", "--porcelain")
        except git.exc.GitCommandError as e:
            raise WorktreeOperationError("worktree list", message=command_error_message(e))

        records = self.parse_porcelain(output)
        logger.debug(f"Found {len(records)} worktrees")
        for record in records:
            logger.debug(f"  {record}")
        return records

    def main_worktree(self) -> WorktreeRecord:
        """Get the record of the main checkout."""
        records = self.list_worktrees()
        if not records:
            raise WorktreeOperationError("worktree list", message="no worktrees registered")
        return records[0]

    def determine_branch_source(self, branch_name: str, start_point: str = "HEAD") -> BranchSource:
        """Decide where the branch of a new worktree comes from.

        Prefers following existing remote work over reusing a local branch,
        and only creates a new branch when neither exists.
        """
        if self.git_ops.has_remote_branch(branch_name):
            source = BranchSource(BranchSourceMode.REMOTE, f"{self.git_ops.remote_name}/{branch_name}")
        elif self.git_ops.has_local_branch(branch_name):
            source = BranchSource(BranchSourceMode.LOCAL, branch_name)
        else:
            source = BranchSource(BranchSourceMode.NEW, start_point)

        logger.debug(f"Branch source for {branch_name}: {source.mode.value} ({source.ref})")
        return source

    def add_worktree(self, path: str, branch_name: str, source: BranchSource) -> None:
        """Register a new worktree at ``path`` checked out on ``branch_name``.

        Raises:
            WorktreeOperationError: If ``git worktree add`` fails
        """
        if source.mode == BranchSourceMode.REMOTE and not self.git_ops.has_local_branch(branch_name):
            args = ["add", "--track", "-b", branch_name, path, source.ref]
        elif source.mode == BranchSourceMode.NEW:
            args = ["add", "-b", branch_name, path, source.ref]
        else:
            args = ["add", path, branch_name]

        try:
            self._get_repo().git.worktree(*args)
        except git.exc.GitCommandError as e:
            raise WorktreeOperationError("worktree add", path, command_error_message(e))
        logger.info(f"Created worktree for {branch_name} at {path}")

    def remove_worktree(self, path: str, force: bool = False) -> None:
        """Remove a worktree at the specified path.

        Args:
            path: Path to the worktree directory
            force: Force removal even if working tree is dirty or locked

        Raises:
            WorktreeOperationError: If ``git worktree remove`` fails
        """
        args = ["remove", path]
        if force:
            args.append("--force")

        try:
            self._get_repo().git.worktree(*args)
        except git.exc.GitCommandError as e:
            raise WorktreeOperationError("worktree remove", path, command_error_message(e))
        logger.info(f"Removed worktree at {path}")

    def prune_worktrees(self) -> None:
        """Prune metadata of worktrees whose directory no longer exists."""
        try:
            self._get_repo().git.worktree("prune")
        except git.exc.GitCommandError as e:
            raise WorktreeOperationError("worktree prune", message=command_error_message(e))
        logger.info("Pruned stale worktree metadata")

    def is_dirty(self, worktree_path: str) -> bool:
        """Check whether a worktree has modified, staged or untracked files.

        A worktree whose status cannot be read is reported as dirty.
        """
        if not os.path.exists(worktree_path):
            logger.debug(f"Worktree path {worktree_path} doesn't exist (orphaned)")
            return False

        try:
            status = self._get_repo().git.execute(
                ["git", "-C", worktree_path, "status", "--porcelain"]
            )
        except git.exc.GitCommandError as e:
            logger.warning(
                f"Could not check worktree status for {worktree_path}: {command_error_message(e)}"
            )
            return True

        return bool(status.strip())
