"""Execution context shared by every service.

Holds the main repository root, the environment and the working directory a
command runs with, so services never read process-global state directly and
tests can hand in their own.
"""

import os
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

import git

from git_worktree_keeper.exceptions import WorktreeKeeperError
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ExecutionContext:
    """Where and with what environment external commands are executed."""

    repo_root: Path
    env: Dict[str, str] = field(default_factory=lambda: dict(os.environ))
    cwd: Optional[Path] = None

    def __post_init__(self):
        self.repo_root = Path(self.repo_root)
        self.cwd = Path(self.cwd) if self.cwd is not None else self.repo_root

    @classmethod
    def discover(
        cls, cwd: Optional[Union[str, Path]] = None, env: Optional[Dict[str, str]] = None
    ) -> "ExecutionContext":
        """Build a context for the repository containing ``cwd``.

        ``repo_root`` is the first entry of ``git worktree list``, so it is the
        main checkout even from a linked worktree or when the git directory
        lives outside the checkout (submodules, ``--separate-git-dir``).
        """
        from git_worktree_keeper.services.git.worktrees import WorktreeService

        cwd = Path(cwd) if cwd is not None else Path(os.getcwd())
        try:
            repo = git.Repo(cwd, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise WorktreeKeeperError(f"Not a git repository: {cwd}") from e

        checkout = repo.working_tree_dir or repo.git_dir
        repo.close()

        context = cls(
            repo_root=Path(checkout),
            env=dict(env) if env is not None else dict(os.environ),
            cwd=cwd,
        )
        context.repo_root = Path(WorktreeService(context).main_worktree().path).resolve()
        logger.debug(f"Main repository root: {context.repo_root}")
        return context

    def repo(self) -> git.Repo:
        """Get a git.Repo for the main checkout running with this context's environment."""
        repo = git.Repo(self.repo_root)
        repo.git.update_environment(**self.env)
        return repo

    def getenv(self, name: str) -> Optional[str]:
        """Look up an environment variable; None when it is not set at all."""
        return self.env.get(name)

    def which(self, binary: str) -> Optional[str]:
        """Find an executable on this context's PATH."""
        return shutil.which(binary, path=self.env.get("PATH"))

    def run(self, args: List[str], timeout: Optional[float] = None) -> subprocess.CompletedProcess:
        """Run an external command from the repository root and capture its output.

        Raises:
            FileNotFoundError: If the executable does not exist
            subprocess.TimeoutExpired: If the command outlives ``timeout``
        """
        logger.debug(f"Running: {' '.join(args)}")
        return subprocess.run(
            args,
            cwd=str(self.repo_root),
            env=self.env,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=False,
        )
