"""Data models for git-worktree-keeper."""

from .worktree import WorktreeRecord, PRStatus, PolicyDecision
from .repository import RepositoryIdentity

__all__ = ["WorktreeRecord", "PRStatus", "PolicyDecision", "RepositoryIdentity"]
