"""Command-line entry point for git-worktree-keeper"""

import sys
from typing import List, Optional

from rich.console import Console

from git_worktree_keeper.cli.args import parse_args
from git_worktree_keeper.config import Config
from git_worktree_keeper.context import ExecutionContext
from git_worktree_keeper.core import WorktreeKeeper
from git_worktree_keeper.exceptions import WorktreeKeeperError
from git_worktree_keeper.logging_config import setup_logging
from git_worktree_keeper.services.display_service import DisplayService

console = Console(stderr=True)


def _build_config(parsed_args) -> Config:
    return Config(
        verbose=parsed_args.verbose,
        debug=parsed_args.debug,
        dry_run=getattr(parsed_args, "dry_run", False),
        force=getattr(parsed_args, "force", False),
        yes=getattr(parsed_args, "yes", False),
        fetch=not getattr(parsed_args, "no_fetch", False),
        from_ref=getattr(parsed_args, "from_ref", "HEAD"),
        delete_branch=getattr(parsed_args, "delete_branch", False),
    )


def dispatch(keeper: WorktreeKeeper, parsed_args) -> int:
    """Run the requested subcommand and return its exit status."""
    command = parsed_args.command

    if command == "new":
        record = keeper.create_worktree(parsed_args.branch)
        print(record.path)
    elif command == "go":
        DisplayService(porcelain=parsed_args.porcelain).display_target(
            keeper.resolve(parsed_args.identifier)
        )
    elif command in ("list", "ls"):
        DisplayService(porcelain=parsed_args.porcelain).display_worktrees(keeper.list_worktrees())
    elif command == "rm":
        keeper.remove_worktrees(parsed_args.identifiers)
    elif command == "clean":
        keeper.clean()
        if parsed_args.merged:
            _, failed = keeper.clean_merged()
            if failed:
                return 1
    elif command == "config":
        value = keeper.config_get(parsed_args.key, all_values=parsed_args.all_values)
        if parsed_args.all_values:
            for item in value:
                print(item)
        elif value is None:
            return 1
        else:
            print(value)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    parsed_args = None
    try:
        parsed_args = parse_args(argv)

        setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

        config = _build_config(parsed_args)
        if parsed_args.debug:
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {value}")

        keeper = WorktreeKeeper(ExecutionContext.discover(), config)
        return dispatch(keeper, parsed_args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except WorktreeKeeperError as e:
        console.print(f"[red]Error: {e}[/red]")
        hint = getattr(e, "hint", None)
        if hint:
            console.print(f"[yellow]{hint}[/yellow]")
        return 1
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if parsed_args is not None and parsed_args.debug:
            console.print_exception()
        return 1


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
