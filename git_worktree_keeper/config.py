"""Configuration handling for git-worktree-keeper"""

import os
from dataclasses import dataclass, field
from typing import Optional, List


@dataclass
class Config:
    """Configuration for git-worktree-keeper with validation."""

    # Stale worktree threshold
    stale_days: int = 30

    # Branches whose worktree is treated as the primary checkout
    main_branches: List[str] = field(default_factory=lambda: ["main", "master"])

    # Execution modes
    dry_run: bool = False
    verbose: bool = False
    debug: bool = False

    # GitHub integration
    github_token: Optional[str] = None
    remote_name: str = "origin"

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_stale_days()
        self._validate_main_branches()
        self._validate_remote_name()
        if not self.github_token:
            self.github_token = os.environ.get("GITHUB_TOKEN") or None

    def _validate_stale_days(self):
        """Validate stale_days is a positive integer."""
        if isinstance(self.stale_days, bool) or not isinstance(self.stale_days, int):
            raise ValueError(f"stale_days must be an integer, got {self.stale_days!r}")
        if self.stale_days <= 0:
            raise ValueError(f"stale_days must be positive, got {self.stale_days}")

    def _validate_main_branches(self):
        """Validate main_branches list."""
        if not isinstance(self.main_branches, list):
            raise ValueError("main_branches must be a list")
        self.main_branches = [b.strip() for b in self.main_branches if b and b.strip()]
        if not self.main_branches:
            raise ValueError("main_branches cannot be empty")

    def _validate_remote_name(self):
        """Validate remote_name is not empty."""
        if not self.remote_name or not self.remote_name.strip():
            raise ValueError("remote_name cannot be empty")
        self.remote_name = self.remote_name.strip()

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "stale_days": self.stale_days,
            "main_branches": self.main_branches,
            "dry_run": self.dry_run,
            "verbose": self.verbose,
            "debug": self.debug,
            "github_token": self.github_token,
            "remote_name": self.remote_name,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {
            "stale_days",
            "main_branches",
            "dry_run",
            "verbose",
            "debug",
            "github_token",
            "remote_name",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)
