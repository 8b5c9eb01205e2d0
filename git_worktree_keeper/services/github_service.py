"""GitHub API integration service"""

from typing import Optional, Union, TYPE_CHECKING

from github import Auth, Github, GithubException
from requests.exceptions import RequestException

from git_worktree_keeper.exceptions import RemoteError
from git_worktree_keeper.models.repository import RepositoryIdentity
from git_worktree_keeper.models.worktree import PRStatus
from git_worktree_keeper.logging_config import get_logger

if TYPE_CHECKING:
    from github.PullRequest import PullRequest
    from github.Repository import Repository
    from git_worktree_keeper.config import Config

logger = get_logger(__name__)


class GitHubService:
    """Reads pull request state from the GitHub REST API."""

    def __init__(self, config: Union["Config", dict]):
        """Initialize the service.

        The client is created lazily on the first request, so constructing
        the service never touches the network.
        """
        self.config = config
        self.github_token: Optional[str] = config.get("github_token")
        self.github: Optional[Github] = None
        self._repos: dict[str, "Repository"] = {}

    @property
    def enabled(self) -> bool:
        """Whether a token is available for API calls."""
        return bool(self.github_token)

    def _get_client(self) -> Github:
        if self.github is None:
            if not self.github_token:
                raise RemoteError("authenticate", "no GitHub token (set GITHUB_TOKEN)")
            self.github = Github(auth=Auth.Token(self.github_token))
        return self.github

    def _get_repo(self, identity: RepositoryIdentity) -> "Repository":
        """Repository handle for ``identity``, reused for the rest of the run."""
        repo = self._repos.get(identity.full_name)
        if repo is None:
            try:
                repo = self._get_client().get_repo(identity.full_name, lazy=True)
            except (GithubException, RequestException) as e:
                raise RemoteError("get_repo", f"{identity.full_name}: {e}")
            self._repos[identity.full_name] = repo
            logger.debug(f"[GitHub] Using repository {identity.full_name}")
        return repo

    def _get_pull(self, identity: RepositoryIdentity, pr_number: int) -> "PullRequest":
        repo = self._get_repo(identity)
        try:
            return repo.get_pull(pr_number)
        except (GithubException, RequestException) as e:
            raise RemoteError("get_pull", f"{identity.full_name}#{pr_number}: {e}")

    def get_pr_status(self, identity: RepositoryIdentity, pr_number: int) -> PRStatus:
        """Get the state of a single pull request.

        A merged PR is always reported as merged even though its state is
        "closed".

        Raises:
            RemoteError: the request failed or returned an unknown state
        """
        pull = self._get_pull(identity, pr_number)

        if pull.merged:
            status = PRStatus.MERGED
        elif pull.state in (PRStatus.OPEN.value, PRStatus.CLOSED.value):
            status = PRStatus(pull.state)
        else:
            raise RemoteError(
                "get_pull", f"{identity.full_name}#{pr_number}: unexpected state {pull.state!r}"
            )

        logger.debug(f"[GitHub] PR #{pr_number} in {identity.full_name} is {status.value}")
        return status

    def get_pr_head_branch(self, identity: RepositoryIdentity, pr_number: int) -> str:
        """Name of the head branch of a pull request."""
        pull = self._get_pull(identity, pr_number)
        branch = pull.head.ref if pull.head else ""
        if not branch:
            raise RemoteError(
                "get_pull", f"PR #{pr_number} has no head branch (may be from a deleted fork)"
            )
        return branch

    def close(self) -> None:
        """Close the GitHub API connection to clean up resources."""
        if self.github:
            try:
                self.github.close()
                logger.debug("[GitHub] Closed GitHub API connection")
            except Exception as e:
                logger.debug(f"[GitHub] Error closing GitHub API connection: {e}")
        self.github = None
        self._repos = {}
