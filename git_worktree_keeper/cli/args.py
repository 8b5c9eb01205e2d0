"""Command-line argument parsing for git-worktree-keeper."""

import argparse
from git_worktree_keeper.__version__ import __version__


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with its subcommands."""
    common = argparse.ArgumentParser(add_help=False)
    # Accepted before or after the subcommand; absent from the namespace unless given
    common.add_argument(
        "-v", "--verbose", action="store_true", default=argparse.SUPPRESS, help="Show verbose output"
    )
    common.add_argument(
        "--debug",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Show debug information for troubleshooting",
    )

    parser = argparse.ArgumentParser(
        prog="git-worktree-keeper",
        description="Manage git worktrees for pull requests",
        epilog="PR status checks need a GITHUB_TOKEN environment variable. "
        "Get a token at https://github.com/settings/tokens (scopes: repo or public_repo)",
        parents=[common],
    )
    parser.add_argument("--version", action="version", version=f"git-worktree-keeper {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    clean = subparsers.add_parser(
        "clean",
        parents=[common],
        help="Clean up worktrees for merged/closed PRs and identify stale worktrees",
        description="Automatically removes worktrees for merged or closed PRs. "
        "Lists stale worktrees (no commits in 30+ days) for manual review.",
    )
    clean.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be cleaned without actually removing",
    )
    clean.add_argument(
        "--stale-days",
        type=_positive_int,
        default=30,
        help="Number of days without commits to consider a worktree stale (default: 30)",
    )

    list_cmd = subparsers.add_parser(
        "list", parents=[common], help="Show every worktree and what clean would do with it"
    )
    list_cmd.add_argument(
        "--stale-days",
        type=_positive_int,
        default=30,
        help="Number of days without commits to consider a worktree stale (default: 30)",
    )

    add = subparsers.add_parser("add", parents=[common], help="Create a worktree for a branch")
    add.add_argument("branch", help="Existing branch to check out")
    add.add_argument("path", nargs="?", help="Worktree directory (default: next to .git, named after the branch)")
    add.add_argument(
        "--append-branch",
        action="store_true",
        help="Treat PATH as a parent directory and append the branch name",
    )

    pr = subparsers.add_parser(
        "pr", parents=[common], help="Fetch a pull request and create a worktree for it"
    )
    pr.add_argument("number", type=_positive_int, help="Pull request number")
    pr.add_argument("path", nargs="?", help="Worktree directory (default: next to .git, named after the branch)")
    pr.add_argument(
        "--append-branch",
        action="store_true",
        help="Treat PATH as a parent directory and append the branch name",
    )

    return parser


def parse_args(argv=None):
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
