"""Display and formatting service for worktree information"""
from typing import List

from rich.console import Console
from rich.table import Table

from git_worktree_keeper.constants import DETACHED_LABEL, LIST_COLUMNS, SYMBOL_MAIN
from git_worktree_keeper.models.worktree import WorktreeRecord

console = Console()


class DisplayService:
    def __init__(self, porcelain: bool = False):
        self.porcelain = porcelain

    def display_worktrees(self, records: List[WorktreeRecord]) -> None:
        """Display worktrees as a table, or as tab-separated lines in porcelain mode."""
        if self.porcelain:
            for record in records:
                print(record.to_porcelain())
            return

        table = Table()
        for label in LIST_COLUMNS:
            table.add_column(label)

        for record in records:
            table.add_row(
                SYMBOL_MAIN if record.is_main else "",
                record.branch or f"[dim]{DETACHED_LABEL}[/dim]",
                record.path,
                style="cyan" if record.is_main else None,
            )

        console.print(table)

    def display_target(self, record: WorktreeRecord) -> None:
        """Print a resolved worktree: its path, or the full record in porcelain mode."""
        print(record.to_porcelain() if self.porcelain else record.path)
