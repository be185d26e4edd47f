"""Layered configuration lookup.

Sources, highest precedence first:

1. local repository config (``git config --local``)
2. team-shared ``.wtkconfig`` at the main repository root (``git config -f``)
3. global config (``git config --global``)
4. system config (``git config --system``)
5. environment variable (scalar keys only)
6. caller-supplied fallback (scalar keys only)

Scalar keys take the first source that has the key at all. Multi-valued keys
merge every git-backed source in order and drop exact duplicates.
"""

from pathlib import Path
from typing import List, Optional, Tuple

import git

from git_worktree_keeper.constants import TEAM_CONFIG_FILE
from git_worktree_keeper.context import ExecutionContext
from git_worktree_keeper.exceptions import ConfigSourceUnreadableError
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)

# git config exit statuses meaning "no value here": 1 is an unset key, 2 a key
# without a section, which no source can define
UNSET_STATUSES = (1, 2)


class ConfigResolver:
    """Read-only view over every configuration source for one repository."""

    def __init__(self, context: ExecutionContext):
        self.context = context

    @property
    def team_config_path(self) -> Path:
        return self.context.repo_root / TEAM_CONFIG_FILE

    def _sources(self) -> List[Tuple[str, List[str]]]:
        """Git-backed sources in precedence order as (name, scope arguments)."""
        sources = [("local", ["--local"])]
        if self.team_config_path.is_file():
            sources.append(("team", ["-f", str(self.team_config_path)]))
        sources.append(("global", ["--global"]))
        sources.append(("system", ["--system"]))
        return sources

    def _query(self, repo: git.Repo, source: str, scope: List[str], action: List[str], key: str) -> Optional[str]:
        """Run one ``git config`` lookup.

        Returns:
            The raw output, or None if the key is unset in this source

        Raises:
            ConfigSourceUnreadableError: If git could not read the source
        """
        try:
            return repo.git.config(*scope, *action, key)
        except git.exc.GitCommandError as e:
            if e.status in UNSET_STATUSES:
                return None
            stderr = (e.stderr if hasattr(e, "stderr") else str(e)).strip()
            raise ConfigSourceUnreadableError(source, stderr or f"exit {e.status}")

    def _safe_query(self, repo: git.Repo, source: str, scope: List[str], action: List[str], key: str) -> Optional[str]:
        try:
            return self._query(repo, source, scope, action, key)
        except ConfigSourceUnreadableError as e:
            logger.warning(f"{e}; ignoring it")
            return None

    def resolve_scalar(self, key: str, env_var: Optional[str] = None, fallback: Optional[str] = None) -> Optional[str]:
        """Get the effective value of a single-valued key.

        Args:
            key: Dot-namespaced git config key
            env_var: Environment variable consulted after every git source
            fallback: Value returned when no source defines the key

        Returns:
            The value from the highest-precedence source that defines the key
        """
        repo = self.context.repo()
        for source, scope in self._sources():
            value = self._safe_query(repo, source, scope, ["--get"], key)
            if value is not None:
                logger.debug(f"{key} = {value!r} (from {source})")
                return value

        if env_var:
            value = self.context.getenv(env_var)
            if value is not None:
                logger.debug(f"{key} = {value!r} (from ${env_var})")
                return value

        logger.debug(f"{key} unset, using fallback {fallback!r}")
        return fallback

    def resolve_multi_value(self, key: str) -> List[str]:
        """Get every value of a multi-valued key across all sources.

        Values keep source precedence order, then their order within a source.
        Later exact duplicates are dropped.
        """
        repo = self.context.repo()
        merged: List[str] = []
        seen = set()
        for source, scope in self._sources():
            output = self._safe_query(repo, source, scope, ["--null", "--get-all"], key)
            if output is None:
                continue
            # Every value is NUL-terminated, so embedded newlines survive
            for value in output.split("\0")[:-1]:
                if value not in seen:
                    seen.add(value)
                    merged.append(value)

        logger.debug(f"{key} = {merged!r}")
        return merged
