"""Command-line entry point for git-worktree-keeper"""

import os
import sys

from rich.console import Console
from rich.markup import escape

from git_worktree_keeper.cli.args import parse_args
from git_worktree_keeper.config import Config
from git_worktree_keeper.core import WorktreeKeeper
from git_worktree_keeper.logging_config import setup_logging

console = Console()


def run_command(keeper: WorktreeKeeper, args) -> int:
    """Dispatch a parsed subcommand to the keeper."""
    if args.command == "clean":
        keeper.clean()
        return 0
    if args.command == "list":
        keeper.show()
        return 0
    if args.command == "add":
        keeper.add_worktree(args.branch, args.path, args.append_branch)
        return 0
    if args.command == "pr":
        keeper.checkout_pr(args.number, args.path, args.append_branch)
        return 0
    raise ValueError(f"Unknown command: {args.command}")


def main(argv=None) -> int:
    """Main entry point for the application."""
    parsed_args = parse_args(argv)
    verbose = getattr(parsed_args, "verbose", False)
    debug = getattr(parsed_args, "debug", False)

    keeper = None
    try:
        setup_logging(verbose=verbose, debug=debug)

        config = Config(
            stale_days=getattr(parsed_args, "stale_days", 30),
            dry_run=getattr(parsed_args, "dry_run", False),
            verbose=verbose,
            debug=debug,
        )

        if debug:
            console.print("[yellow]Debug mode enabled[/yellow]")
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                if key == "github_token" and value:
                    value = "***"
                console.print(f"  {key}: {value}")

        keeper = WorktreeKeeper(os.getcwd(), config)
        return run_command(keeper, parsed_args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if debug:
            console.print_exception()
        return 1
    finally:
        if keeper is not None:
            keeper.close()


if __name__ == "__main__":
    sys.exit(main())
