"""Worktree operations service for git-worktree-keeper."""

import os
from datetime import datetime, timezone
from typing import Optional

import git

from git_worktree_keeper.exceptions import ExecutionError, ParseError, WorktreeExistsError
from git_worktree_keeper.models.worktree import WorktreeRecord
from git_worktree_keeper.services.pr_number import extract_pr_number
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)

BRANCH_REF_PREFIX = "refs/heads/"


def _describe_git_error(command: str, error: git.exc.GitCommandError) -> str:
    """Build a one-line description of a failed git command."""
    stderr = (error.stderr or "").strip() if isinstance(error.stderr, str) else ""
    status = error.status if error.status is not None else "unknown"
    if stderr:
        return f"git {command} failed (exit {status}): {stderr}"
    return f"git {command} failed with exit code {status}"


def _finish_record(fields: dict, records: list, seen_paths: set) -> None:
    """Turn the fields of one porcelain block into a WorktreeRecord."""
    path = fields.get("path")
    if not path or path in seen_paths:
        return

    branch = fields.get("branch", "")
    # Branch name first, then the directory name
    pr_number = extract_pr_number(branch)
    if pr_number is None:
        pr_number = extract_pr_number(os.path.basename(path.rstrip("/")))

    seen_paths.add(path)
    records.append(
        WorktreeRecord(
            path=path,
            branch=branch,
            pr_number=pr_number,
            is_main=not records,
        )
    )


def parse_worktree_porcelain(output: str) -> list[WorktreeRecord]:
    """Parse `git worktree list --porcelain` output.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name
        (blank line between worktrees)

    Unknown lines are ignored. The first block is the main worktree.

    Args:
        output: Raw porcelain text

    Returns:
        WorktreeRecord objects in enumeration order, one per distinct path
    """
    records: list[WorktreeRecord] = []
    seen_paths: set[str] = set()
    current: dict = {}

    for raw_line in output.splitlines():
        line = raw_line.rstrip("\r")

        if not line.strip():
            if current:
                _finish_record(current, records, seen_paths)
                current = {}
            continue

        if line.startswith("worktree "):
            # A new block without a separating blank line still starts a record
            if current:
                _finish_record(current, records, seen_paths)
            current = {"path": line[len("worktree "):]}
        elif not current:
            # Lines before the first worktree line
            continue
        elif line.startswith("branch "):
            branch_ref = line[len("branch "):].strip()
            if branch_ref.startswith(BRANCH_REF_PREFIX):
                current["branch"] = branch_ref[len(BRANCH_REF_PREFIX):]
            else:
                current["branch"] = ""
        elif line == "detached" or line == "bare":
            current["branch"] = ""

    if current:
        _finish_record(current, records, seen_paths)

    return records


def parse_commit_timestamp(output: str) -> datetime:
    """Convert `git log --format=%at` output to an aware UTC datetime."""
    timestamp = output.strip()
    if not timestamp:
        raise ParseError("log --format=%at", "no commits found")
    try:
        return datetime.fromtimestamp(int(timestamp), tz=timezone.utc)
    except (ValueError, OverflowError, OSError) as e:
        raise ParseError("log --format=%at", f"invalid timestamp {timestamp!r}: {e}")


class WorktreeService:
    """Service for listing, adding and removing git worktrees."""

    def __init__(self, repo_path: str):
        """Initialize the worktree service.

        Args:
            repo_path: Path to the git repository
        """
        self.repo_path = repo_path

    def _get_repo(self) -> git.Repo:
        """Open the repository, raising ExecutionError if it is not one."""
        try:
            return git.Repo(self.repo_path, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise ExecutionError("open_repository", f"not a git repository: {e}")

    def _run(self, operation: str, *args: str) -> str:
        """Run git with ``args`` in the repository and return its stdout.

        Args:
            operation: Short name of the command, used in error messages
            *args: Arguments passed to git
        """
        repo = self._get_repo()
        try:
            return repo.git.execute(["git", *args])
        except git.exc.GitCommandNotFound as e:
            raise ExecutionError(operation, f"git executable not found: {e}")
        except git.exc.GitCommandError as e:
            raise ExecutionError(operation, _describe_git_error(operation, e))
        finally:
            repo.close()

    def list_worktrees(self, with_commit_times: bool = True) -> list[WorktreeRecord]:
        """Enumerate all worktrees of the repository.

        Args:
            with_commit_times: Look up the last commit time of every worktree
                that has a branch

        Returns:
            WorktreeRecord objects in enumeration order

        Raises:
            ExecutionError: git is missing or `git worktree list` failed
        """
        output = self._run("worktree list", "worktree", "list", "--porcelain")
        records = parse_worktree_porcelain(output)

        logger.debug(f"[WORKTREE] Found {len(records)} worktrees")
        for record in records:
            logger.debug(f"[WORKTREE]   {record}")

        if with_commit_times:
            for record in records:
                if record.branch:
                    record.last_commit_time = self.get_last_commit_time(record.path)

        return records

    def get_last_commit_time(self, worktree_path: str) -> Optional[datetime]:
        """Get the time of the last commit checked out in a worktree.

        Returns:
            Aware UTC datetime, or None if it could not be determined
        """
        try:
            output = self._run("log", "-C", worktree_path, "log", "-1", "--format=%at")
            return parse_commit_timestamp(output)
        except (ExecutionError, ParseError) as e:
            logger.debug(f"[WORKTREE] Could not get last commit for {worktree_path}: {e}")
            return None

    def remove_worktree(self, path: str, force: bool = True) -> tuple[bool, Optional[str]]:
        """Remove a worktree at the specified path.

        Args:
            path: Path to the worktree directory
            force: Remove even if the working tree is dirty or locked

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        args = ["remove", path]
        if force:
            args.append("--force")

        try:
            self._run("worktree remove", "worktree", *args)
        except ExecutionError as e:
            logger.debug(f"[WORKTREE] Failed to remove worktree at {path}: {e.message}")
            return False, e.message

        logger.info(f"Removed worktree at {path}")
        return True, None

    def get_worktree_path_for_branch(self, branch: str) -> Optional[str]:
        """Return the path of the worktree that has ``branch`` checked out."""
        for record in self.list_worktrees(with_commit_times=False):
            if record.branch == branch:
                return record.path
        return None

    def get_common_dir_parent(self) -> str:
        """Directory containing the shared .git directory."""
        repo = self._get_repo()
        try:
            working_dir = repo.working_dir
        finally:
            repo.close()
        # git prints a path relative to the working directory from the main checkout
        common_dir = self._run("rev-parse", "rev-parse", "--git-common-dir").strip()
        common_dir = os.path.join(working_dir, common_dir)
        return os.path.dirname(os.path.normpath(common_dir))

    def resolve_worktree_path(
        self, branch: str, path: Optional[str] = None, append_branch: bool = False
    ) -> str:
        """Work out where a worktree for ``branch`` should live.

        Without ``path`` the worktree goes next to the shared .git directory,
        named after the branch.
        """
        if path:
            return os.path.join(path, branch) if append_branch else path
        return os.path.join(self.get_common_dir_parent(), branch)

    def add_worktree(
        self, branch: str, path: Optional[str] = None, append_branch: bool = False
    ) -> str:
        """Create a worktree for an existing branch.

        Refuses when the branch already has a worktree or when the target
        directory exists.

        Returns:
            Path of the new worktree

        Raises:
            WorktreeExistsError: a pre-check failed
            ExecutionError: git failed to create the worktree
        """
        target = self.resolve_worktree_path(branch, path, append_branch)

        existing_path = self.get_worktree_path_for_branch(branch)
        if existing_path:
            raise WorktreeExistsError(
                f"worktree for branch '{branch}' already exists at: {existing_path}"
            )

        if os.path.exists(target):
            raise WorktreeExistsError(
                f"directory already exists at: {target}\n"
                "Please remove it or choose a different path"
            )

        try:
            self._run("worktree add", "worktree", "add", target, branch)
        except ExecutionError as e:
            message = e.message or ""
            if "already exists" in message:
                raise WorktreeExistsError(
                    f"worktree or branch '{branch}' already exists\n"
                    "Use 'git worktree list' to see existing worktrees"
                )
            if "invalid reference" in message:
                raise ExecutionError(
                    "worktree_add",
                    f"branch '{branch}' not found\n"
                    "Make sure the branch exists or the PR has been fetched",
                )
            raise

        logger.info(f"Created worktree for {branch} at {target}")
        return target

    def fetch_pull_request(self, remote: str, pr_number: int, branch: str) -> None:
        """Fetch a PR head into a local branch (works for fork PRs too)."""
        self._run("fetch", "fetch", remote, f"pull/{pr_number}/head:{branch}")
        logger.info(f"Fetched PR #{pr_number} into {branch}")

    def get_remote_url(self, remote: str = "origin") -> Optional[str]:
        """URL of the named remote, or None if it does not exist."""
        repo = self._get_repo()
        try:
            return repo.remote(remote).url
        except (ValueError, git.exc.GitCommandError) as e:
            logger.debug(f"No usable remote '{remote}': {e}")
            return None
        finally:
            repo.close()
