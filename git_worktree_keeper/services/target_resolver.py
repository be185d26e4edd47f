"""Resolve a user-supplied identifier into a registered worktree."""

from pathlib import PurePath
from typing import List, Optional

from git_worktree_keeper.constants import MAIN_WORKTREE_SENTINEL
from git_worktree_keeper.exceptions import TargetAmbiguousError, TargetNotFoundError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.worktree import WorktreeRecord
from git_worktree_keeper.services.git.worktrees import WorktreeService
from git_worktree_keeper.services.paths import worktree_folder_name

logger = get_logger(__name__)


class TargetResolver:
    """Maps identifiers to worktree records.

    Resolution order, first match wins:

    1. ``"1"`` is always the main checkout.
    2. The main checkout's current branch name selects the main checkout.
    3. A worktree whose folder is the sanitized (and prefixed) identifier.
    4. A worktree whose branch equals the identifier verbatim.

    Steps 3 and 4 refuse to guess when more than one worktree matches.
    """

    def __init__(self, worktree_service: WorktreeService, prefix: Optional[str] = ""):
        self.worktree_service = worktree_service
        self.prefix = prefix or ""

    def resolve_target(self, identifier: str) -> WorktreeRecord:
        """Find the worktree an identifier refers to.

        Raises:
            TargetNotFoundError: If nothing matches
            TargetAmbiguousError: If several worktrees match equally
        """
        records = self.worktree_service.list_worktrees()
        if not records:
            raise TargetNotFoundError(identifier)
        main = records[0]

        if identifier == MAIN_WORKTREE_SENTINEL:
            logger.debug("Sentinel resolves to the main checkout")
            return main

        if main.branch and identifier == main.branch:
            logger.debug(f"{identifier} is the main checkout's current branch")
            return main

        folder = worktree_folder_name(identifier, self.prefix)
        if folder:
            by_folder = [r for r in records if PurePath(r.path).name == folder]
            match = self._single(identifier, by_folder)
            if match:
                logger.debug(f"{identifier} matched by folder name {folder}")
                return match

        by_branch = [r for r in records if r.branch and r.branch == identifier]
        match = self._single(identifier, by_branch)
        if match:
            logger.debug(f"{identifier} matched by branch name")
            return match

        raise TargetNotFoundError(identifier)

    @staticmethod
    def _single(identifier: str, matches: List[WorktreeRecord]) -> Optional[WorktreeRecord]:
        if len(matches) > 1:
            raise TargetAmbiguousError(identifier, [r.path for r in matches])
        return matches[0] if matches else None
