"""Core functionality for git-worktree-keeper"""

from pathlib import Path
from typing import List, Optional, Tuple, Union

from rich.console import Console

from git_worktree_keeper.config import Config
from git_worktree_keeper.constants import (
    ENV_WORKTREES_DIR,
    ENV_WORKTREES_PREFIX,
    KEY_WORKTREES_DIR,
    KEY_WORKTREES_PREFIX,
)
from git_worktree_keeper.context import ExecutionContext
from git_worktree_keeper.exceptions import WorktreeKeeperError, WorktreeOperationError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.worktree import WorktreeRecord
from git_worktree_keeper.services.config_resolver import ConfigResolver
from git_worktree_keeper.services.git import GitOperations, WorktreeService
from git_worktree_keeper.services.paths import resolve_base_dir, worktree_folder_name
from git_worktree_keeper.services.providers import (
    ProviderDetector,
    ensure_provider_cli,
    is_branch_merged,
)
from git_worktree_keeper.services.target_resolver import TargetResolver

console = Console(stderr=True)
logger = get_logger(__name__)


class WorktreeKeeper:
    """Main class for managing a repository's worktrees."""

    def __init__(self, context: ExecutionContext, config: Optional[Union[Config, dict]] = None):
        """Initialize WorktreeKeeper.

        Args:
            context: Execution context of the main repository
            config: Run options as a Config or dict
        """
        self.context = context
        if config is None:
            self.config = Config()
        elif isinstance(config, dict):
            self.config = Config.from_dict(config)
        else:
            self.config = config

        self.config_resolver = ConfigResolver(context)
        self.git_ops = GitOperations(context)
        self.worktree_service = WorktreeService(context, self.git_ops)
        self.provider_detector = ProviderDetector(context, self.config_resolver, self.git_ops)

    @property
    def base_dir(self) -> Path:
        configured = self.config_resolver.resolve_scalar(KEY_WORKTREES_DIR, ENV_WORKTREES_DIR, "")
        return resolve_base_dir(configured, self.context.repo_root, home=self.context.getenv("HOME"))

    @property
    def prefix(self) -> str:
        return self.config_resolver.resolve_scalar(KEY_WORKTREES_PREFIX, ENV_WORKTREES_PREFIX, "") or ""

    def resolve(self, identifier: str) -> WorktreeRecord:
        """Resolve an identifier to a worktree record."""
        return TargetResolver(self.worktree_service, self.prefix).resolve_target(identifier)

    def list_worktrees(self) -> List[WorktreeRecord]:
        return self.worktree_service.list_worktrees()

    def create_worktree(self, branch_name: str) -> WorktreeRecord:
        """Create a worktree for ``branch_name`` under the base directory.

        Raises:
            WorktreeKeeperError: If the branch name is unusable
            WorktreeOperationError: If the target folder exists or git refuses
        """
        folder = worktree_folder_name(branch_name, self.prefix)
        if not branch_name.strip() or not folder:
            raise WorktreeKeeperError(f"Invalid branch name: {branch_name!r}")

        base_dir = self.base_dir
        path = base_dir / folder
        if path.exists():
            raise WorktreeOperationError("worktree add", str(path), "path already exists")

        if self.config.fetch and self.git_ops.get_remote_url():
            self.git_ops.fetch_branch(branch_name)

        source = self.worktree_service.determine_branch_source(branch_name, self.config.from_ref)

        base_dir.mkdir(parents=True, exist_ok=True)
        self.worktree_service.add_worktree(str(path), branch_name, source)
        console.print(f"[green]✓ Created worktree for {branch_name} ({source.mode.value}) at {path}[/green]")
        return WorktreeRecord(is_main=False, path=str(path), branch=branch_name)

    def remove_worktrees(self, identifiers: List[str]) -> List[WorktreeRecord]:
        """Remove the worktrees the identifiers resolve to.

        All identifiers are resolved before anything is removed.

        Raises:
            WorktreeKeeperError: If an identifier is the main checkout
        """
        records = [self.resolve(identifier) for identifier in identifiers]
        for record in records:
            if record.is_main:
                raise WorktreeKeeperError("Cannot remove the main worktree")

        for record in records:
            self._remove(record)
            self._delete_branch(record)
        return records

    def _remove(self, record: WorktreeRecord) -> None:
        if self.config.dry_run:
            console.print(f"Would remove worktree at {record.path}")
            return

        self.worktree_service.remove_worktree(record.path, force=self.config.force)
        console.print(f"[green]✓ Removed worktree at {record.path}[/green]")

    def _delete_branch(self, record: WorktreeRecord) -> None:
        if self.config.dry_run or not self.config.delete_branch or not record.branch:
            return

        self.git_ops.delete_branch(record.branch, force=True)
        console.print(f"[green]✓ Deleted branch {record.branch}[/green]")

    def clean(self) -> List[Path]:
        """Prune stale worktree metadata and remove empty folders under the base directory.

        Returns:
            Folders that were (or in dry-run mode would be) removed
        """
        if not self.config.dry_run:
            self.worktree_service.prune_worktrees()

        base_dir = self.base_dir
        if not base_dir.is_dir():
            return []

        empty = sorted(p for p in base_dir.iterdir() if p.is_dir() and not any(p.iterdir()))
        for folder in empty:
            if self.config.dry_run:
                console.print(f"Would remove empty directory {folder}")
            else:
                folder.rmdir()
                logger.info(f"Removed empty directory {folder}")
        return empty

    def find_merged_worktrees(self) -> Tuple[List[WorktreeRecord], List[WorktreeRecord]]:
        """Find worktrees whose branch has a merged change request.

        Returns:
            Tuple of (removable, skipped_dirty) records

        Raises:
            ProviderUnknownError: If no provider can be determined
            CliMissingError: If the provider's CLI is not installed
            CliUnauthenticatedError: If the provider's CLI is not authenticated
        """
        client = self.provider_detector.detect_provider()
        ensure_provider_cli(client)
        console.print(f"[dim]Checking merged {client.display_name} change requests...[/dim]")

        removable: List[WorktreeRecord] = []
        skipped: List[WorktreeRecord] = []
        for record in self.worktree_service.list_worktrees():
            if record.is_main or not record.branch:
                continue
            if not is_branch_merged(client, record.branch):
                continue
            if not self.config.force and self.worktree_service.is_dirty(record.path):
                console.print(f"[yellow]Skipping {record.branch} - has uncommitted changes[/yellow]")
                skipped.append(record)
                continue
            removable.append(record)

        return removable, skipped

    def clean_merged(self) -> Tuple[List[WorktreeRecord], List[Tuple[WorktreeRecord, str]]]:
        """Remove worktrees whose branch was merged on the hosting provider.

        Returns:
            Tuple of (removed, failed) where failed pairs a record with its error
        """
        removable, _ = self.find_merged_worktrees()

        if not removable:
            console.print("\n[green]No merged worktrees to clean up![/green]")
            return [], []

        console.print(f"\n[yellow]Found {len(removable)} merged worktrees:[/yellow]")
        for record in removable:
            console.print(f"  {record.branch} ({record.path})")

        if self.config.dry_run:
            return [], []

        if not self.config.yes:
            response = console.input("\nRemove these worktrees? [y/N] ")
            if response.lower() != "y":
                console.print("[yellow]Cleanup cancelled[/yellow]")
                return [], []

        removed: List[WorktreeRecord] = []
        failed: List[Tuple[WorktreeRecord, str]] = []
        for record in removable:
            try:
                self._remove(record)
            except WorktreeOperationError as e:
                console.print(f"[red]✗ Failed to remove worktree at {record.path}: {e}[/red]")
                failed.append((record, str(e)))
                continue
            removed.append(record)

            # The worktree is gone either way; a kept branch is only reported
            try:
                self._delete_branch(record)
            except WorktreeOperationError as e:
                console.print(f"[yellow]Removed worktree but kept branch {record.branch}: {e}[/yellow]")

        console.print(f"\n[green]Successfully removed {len(removed)} worktrees[/green]")
        return removed, failed

    def config_get(self, key: str, all_values: bool = False) -> Union[Optional[str], List[str]]:
        """Effective value of a configuration key."""
        if all_values:
            return self.config_resolver.resolve_multi_value(key)
        return self.config_resolver.resolve_scalar(key)
