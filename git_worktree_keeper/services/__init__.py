"""Services used by git-worktree-keeper."""
