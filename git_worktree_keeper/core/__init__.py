"""Core worktree analysis and cleanup for git-worktree-keeper."""

from .worktree_keeper import WorktreeKeeper, CleanupReport, parse_stale_selection

__all__ = ["WorktreeKeeper", "CleanupReport", "parse_stale_selection"]
