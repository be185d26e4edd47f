"""Companion CLI integration shared by every hosting provider."""

import subprocess
from abc import ABC, abstractmethod
from enum import Enum
from typing import List

from git_worktree_keeper.constants import DEFAULT_PROVIDER_TIMEOUT
from git_worktree_keeper.context import ExecutionContext
from git_worktree_keeper.exceptions import CliMissingError, CliUnauthenticatedError
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


class ProviderName(Enum):
    """Supported hosting providers."""
    GITHUB = "github"
    GITLAB = "gitlab"


class ProviderClient(ABC):
    """A hosting provider reached through its command-line tool.

    Subclasses declare the binary and build the merged-change-request query;
    probing and running are shared.
    """

    name: ProviderName
    display_name: str
    cli_binary: str
    install_url: str
    auth_check_command: List[str] = ["repo", "view"]

    def __init__(self, context: ExecutionContext, timeout: float = DEFAULT_PROVIDER_TIMEOUT):
        self.context = context
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"{type(self).__name__}(timeout={self.timeout})"

    @abstractmethod
    def merge_query_command(self, branch_name: str) -> List[str]:
        """Arguments (after the binary) listing merged change requests from a branch."""

    @abstractmethod
    def parse_merge_query(self, output: str) -> bool:
        """Whether the merge query output reports at least one merged change request.

        Raises:
            ValueError: If the output cannot be decoded
        """

    def is_installed(self) -> bool:
        return self.context.which(self.cli_binary) is not None

    def probe_auth(self) -> bool:
        """Check that the CLI can view the current repository."""
        try:
            result = self.context.run([self.cli_binary, *self.auth_check_command], timeout=self.timeout)
        except (FileNotFoundError, subprocess.TimeoutExpired, subprocess.SubprocessError) as e:
            logger.debug(f"[{self.display_name}] Auth probe failed: {e}")
            return False

        if result.returncode != 0:
            logger.debug(
                f"[{self.display_name}] Auth probe exited {result.returncode}: {result.stderr.strip()}"
            )
        return result.returncode == 0

    def ensure_cli(self) -> None:
        """Make sure the CLI is installed and authenticated.

        Raises:
            CliMissingError: If the binary is not on PATH
            CliUnauthenticatedError: If the CLI cannot view the current repository
        """
        if not self.is_installed():
            raise CliMissingError(self.display_name, self.cli_binary, self.install_url)
        if not self.probe_auth():
            raise CliUnauthenticatedError(self.display_name, self.cli_binary)
        logger.debug(f"[{self.display_name}] {self.cli_binary} is installed and authenticated")

    def query_merged_branch(self, branch_name: str) -> bool:
        """Check if a branch has a merged change request.

        Any failure counts as "not merged": leaving a worktree behind is
        recoverable, deleting unmerged work is not.
        """
        args = [self.cli_binary, *self.merge_query_command(branch_name)]
        try:
            result = self.context.run(args, timeout=self.timeout)
        except subprocess.TimeoutExpired:
            logger.warning(
                f"[{self.display_name}] Merge query for {branch_name} timed out after {self.timeout}s"
            )
            return False
        except (FileNotFoundError, subprocess.SubprocessError) as e:
            logger.debug(f"[{self.display_name}] Merge query for {branch_name} failed: {e}")
            return False

        if result.returncode != 0:
            logger.debug(
                f"[{self.display_name}] Merge query for {branch_name} exited "
                f"{result.returncode}: {result.stderr.strip()}"
            )
            return False

        try:
            merged = self.parse_merge_query(result.stdout)
        except ValueError as e:
            logger.debug(f"[{self.display_name}] Unreadable merge query output for {branch_name}: {e}")
            return False

        logger.debug(f"[{self.display_name}] {branch_name} merged: {merged}")
        return merged
