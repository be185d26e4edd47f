"""Command-line argument parsing for git-worktree-keeper."""

import argparse
from typing import List, Optional

from git_worktree_keeper.__version__ import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-wtk",
        description="Manage parallel git worktrees, one per branch",
        epilog="Settings are read from git config (wtk.*), a team .wtkconfig file "
        "at the repository root, and WTK_* environment variables.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument("--version", action="version", version=f"git-wtk {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    new = subparsers.add_parser("new", help="Create a worktree for a branch")
    new.add_argument("branch", help="Branch to check out (remote, local or new)")
    new.add_argument(
        "--from", dest="from_ref", default="HEAD", help="Start point for a new branch (default: HEAD)"
    )
    new.add_argument(
        "--no-fetch", action="store_true", help="Do not fetch the branch from origin first"
    )

    go = subparsers.add_parser("go", help="Print the path of a worktree (use 1 for the main one)")
    go.add_argument("identifier", help="Branch name, folder name or 1")
    go.add_argument("--porcelain", action="store_true", help="Print main-flag, path and branch")

    list_parser = subparsers.add_parser("list", aliases=["ls"], help="List worktrees")
    list_parser.add_argument(
        "--porcelain", action="store_true", help="Tab-separated output for scripts"
    )

    rm = subparsers.add_parser("rm", help="Remove worktrees")
    rm.add_argument("identifiers", nargs="+", metavar="identifier", help="Branch or folder name")
    rm.add_argument("--force", action="store_true", help="Remove even with uncommitted changes")
    rm.add_argument(
        "--delete-branch", action="store_true", help="Also delete the worktree's local branch"
    )
    rm.add_argument("--dry-run", action="store_true", help="Show what would be removed")

    clean = subparsers.add_parser(
        "clean", help="Prune stale worktrees and remove empty worktree folders"
    )
    clean.add_argument(
        "--merged",
        action="store_true",
        help="Also remove worktrees whose pull/merge request was merged (needs gh or glab)",
    )
    clean.add_argument("--dry-run", action="store_true", help="Show what would be removed")
    clean.add_argument("--yes", "-y", action="store_true", help="Skip confirmations")
    clean.add_argument("--force", action="store_true", help="Remove even with uncommitted changes")
    clean.add_argument(
        "--delete-branch", action="store_true", help="Also delete the local branch of removed worktrees"
    )

    config = subparsers.add_parser("config", help="Read effective configuration")
    config_sub = config.add_subparsers(dest="config_command", metavar="ACTION")
    config_sub.required = True
    config_get = config_sub.add_parser("get", help="Print the effective value of a key")
    config_get.add_argument("key", help="Configuration key, e.g. wtk.worktrees.dir")
    config_get.add_argument(
        "--all", dest="all_values", action="store_true", help="Merge a multi-valued key across sources"
    )

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
