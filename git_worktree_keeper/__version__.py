"""Version information for git-worktree-keeper."""

try:
    from git_worktree_keeper._version import __version__
except ImportError:
    # Running from a source tree without a generated _version module
    __version__ = "0.0.0+unknown"
