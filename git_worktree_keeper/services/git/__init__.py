"""Git-related services for git-worktree-keeper."""

from .worktrees import WorktreeService, parse_worktree_porcelain, parse_commit_timestamp

__all__ = [
    "WorktreeService",
    "parse_worktree_porcelain",
    "parse_commit_timestamp",
]
