"""
git-worktree-keeper - Keep pull-request worktrees tidy
"""

from .__version__ import __version__
from .core import WorktreeKeeper
from .cli.main import main

__all__ = ["WorktreeKeeper", "main", "__version__"]
