"""Worktree data models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class PRStatus(Enum):
    """State of the pull request a worktree belongs to."""
    NONE = "none"
    OPEN = "open"
    MERGED = "merged"
    CLOSED = "closed"


class PolicyDecision(Enum):
    """What the cleanup policy decided for a worktree."""
    REMOVE = "remove"
    STALE = "stale"
    ACTIVE = "active"


@dataclass
class WorktreeRecord:
    """A single worktree reported by `git worktree list --porcelain`."""

    path: str
    branch: str = ""
    pr_number: Optional[int] = None
    last_commit_time: Optional[datetime] = None
    pr_status: PRStatus = PRStatus.NONE
    is_main: bool = False  # First block of the enumeration

    @property
    def name(self) -> str:
        """Final path segment, used for display."""
        return self.path.rstrip("/").rsplit("/", 1)[-1]

    def days_since_commit(self, now: datetime) -> Optional[int]:
        """Whole days since the last commit, or None if unknown."""
        if self.last_commit_time is None:
            return None
        hours = (now - self.last_commit_time).total_seconds() // 3600
        return int(hours // 24)

    def __str__(self) -> str:
        branch = self.branch or "(detached)"
        main_marker = " (main)" if self.is_main else ""
        return f"{branch} @ {self.path}{main_marker}"
