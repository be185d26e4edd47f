"""Git ref and remote operations"""

from typing import Optional

import git

from git_worktree_keeper.constants import REMOTE_NAME
from git_worktree_keeper.context import ExecutionContext
from git_worktree_keeper.exceptions import WorktreeOperationError
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


def command_error_message(e: git.exc.GitCommandError) -> str:
    """Extract stderr and exit status from a GitCommandError."""
    stderr = (e.stderr if hasattr(e, "stderr") else str(e)).strip()
    status = e.status if hasattr(e, "status") else "unknown"
    if stderr:
        return f"exit {status}: {stderr}"
    return f"exit code {status}"


class GitOperations:
    """Service for branch and remote queries against the main repository."""

    def __init__(self, context: ExecutionContext):
        self.context = context
        self.remote_name = REMOTE_NAME

    def _get_repo(self) -> git.Repo:
        return self.context.repo()

    def _ref_exists(self, ref: str) -> bool:
        try:
            self._get_repo().git.rev_parse("--verify", "--quiet", ref)
            return True
        except git.exc.GitCommandError:
            return False

    def has_remote_branch(self, branch_name: str) -> bool:
        """Check if ``origin/<branch_name>`` exists as a remote-tracking branch."""
        return self._ref_exists(f"refs/remotes/{self.remote_name}/{branch_name}")

    def has_local_branch(self, branch_name: str) -> bool:
        """Check if ``branch_name`` exists as a local branch."""
        return self._ref_exists(f"refs/heads/{branch_name}")

    def get_remote_url(self) -> Optional[str]:
        """Get the URL of the origin remote, or None if there is no such remote."""
        try:
            url = self._get_repo().git.remote("get-url", self.remote_name).strip()
        except git.exc.GitCommandError as e:
            logger.debug(f"No {self.remote_name} remote: {command_error_message(e)}")
            return None
        return url or None

    def fetch_branch(self, branch_name: str) -> bool:
        """Fetch one branch from origin, best effort.

        Returns:
            True if the fetch succeeded
        """
        try:
            self._get_repo().git.fetch(self.remote_name, branch_name)
            logger.debug(f"Fetched {self.remote_name}/{branch_name}")
            return True
        except git.exc.GitCommandError as e:
            logger.debug(f"Could not fetch {branch_name}: {command_error_message(e)}")
            return False

    def delete_branch(self, branch_name: str, force: bool = False) -> None:
        """Delete a local branch.

        Raises:
            WorktreeOperationError: If git refuses to delete the branch
        """
        try:
            self._get_repo().git.branch("-D" if force else "-d", branch_name)
            logger.info(f"Deleted branch {branch_name}")
        except git.exc.GitCommandError as e:
            raise WorktreeOperationError("branch delete", branch_name, command_error_message(e))
