"""Custom exceptions for git-worktree-keeper"""

from typing import Optional


class WorktreeKeeperError(Exception):
    """Base exception for all git-worktree-keeper errors."""
    pass


class ExecutionError(WorktreeKeeperError):
    """Exception raised when git is unavailable or a git command fails."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class WorktreeExistsError(ExecutionError):
    """Exception raised when a worktree or its target directory already exists."""

    def __init__(self, message: str):
        super().__init__("worktree_add", message)


class ParseError(WorktreeKeeperError):
    """Exception raised for output that could not be interpreted."""

    def __init__(self, source: str, message: Optional[str] = None):
        self.source = source
        self.message = message

        error_msg = f"Could not parse output of '{source}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class RemoteError(WorktreeKeeperError):
    """Exception raised for errors in GitHub API operations."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.message = message

        error_msg = f"GitHub API operation '{operation}' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class UserInputError(WorktreeKeeperError):
    """Exception raised for an interactive reply that could not be understood."""
    pass
