"""Tests for GitHubService"""
from unittest.mock import Mock, patch

import pytest
from github import GithubException

from git_worktree_keeper.exceptions import RemoteError
from git_worktree_keeper.models.repository import RepositoryIdentity
from git_worktree_keeper.models.worktree import PRStatus
from git_worktree_keeper.services.github_service import GitHubService

IDENTITY = RepositoryIdentity("test", "repo")


def make_pull(state="open", merged=False, head_ref="feature-x"):
    pull = Mock()
    pull.state = state
    pull.merged = merged
    pull.head.ref = head_ref
    return pull


@pytest.fixture
def service_with_pull(mock_config):
    """GitHubService whose client returns a configurable pull request."""
    service = GitHubService(mock_config)
    with patch("git_worktree_keeper.services.github_service.Github") as mock_github_class:
        mock_gh = Mock()
        mock_repo = Mock()
        mock_github_class.return_value = mock_gh
        mock_gh.get_repo.return_value = mock_repo
        yield service, mock_gh, mock_repo


class TestGitHubServiceInit:
    """Test GitHubService initialization."""

    def test_token_from_config(self, mock_config):
        service = GitHubService(mock_config)
        assert service.github_token == "test_token_for_testing"
        assert service.enabled is True

    def test_without_token(self, mock_config):
        mock_config["github_token"] = None
        service = GitHubService(mock_config)
        assert service.enabled is False

    def test_without_token_requests_fail(self, mock_config):
        mock_config["github_token"] = None
        service = GitHubService(mock_config)
        with pytest.raises(RemoteError):
            service.get_pr_status(IDENTITY, 1)


class TestGetPrStatus:
    """Test mapping of PR state."""

    def test_open(self, service_with_pull):
        service, mock_gh, mock_repo = service_with_pull
        mock_repo.get_pull.return_value = make_pull("open")

        assert service.get_pr_status(IDENTITY, 12) is PRStatus.OPEN
        mock_gh.get_repo.assert_called_once_with("test/repo", lazy=True)
        mock_repo.get_pull.assert_called_once_with(12)

    def test_closed(self, service_with_pull):
        service, _, mock_repo = service_with_pull
        mock_repo.get_pull.return_value = make_pull("closed")

        assert service.get_pr_status(IDENTITY, 12) is PRStatus.CLOSED

    def test_merged_wins_over_state(self, service_with_pull):
        service, _, mock_repo = service_with_pull
        mock_repo.get_pull.return_value = make_pull("closed", merged=True)

        assert service.get_pr_status(IDENTITY, 12) is PRStatus.MERGED

    def test_unexpected_state(self, service_with_pull):
        service, _, mock_repo = service_with_pull
        mock_repo.get_pull.return_value = make_pull("draft")

        with pytest.raises(RemoteError):
            service.get_pr_status(IDENTITY, 12)

    def test_not_found(self, service_with_pull):
        service, _, mock_repo = service_with_pull
        mock_repo.get_pull.side_effect = GithubException(404, {"message": "Not Found"}, None)

        with pytest.raises(RemoteError) as exc_info:
            service.get_pr_status(IDENTITY, 999)

        assert "test/repo#999" in str(exc_info.value)

    def test_repository_lookup_failure(self, service_with_pull):
        service, mock_gh, _ = service_with_pull
        mock_gh.get_repo.side_effect = GithubException(401, {"message": "Bad credentials"}, None)

        with pytest.raises(RemoteError):
            service.get_pr_status(IDENTITY, 1)

    def test_repository_handle_reused(self, service_with_pull):
        service, mock_gh, mock_repo = service_with_pull
        mock_repo.get_pull.return_value = make_pull("open")

        service.get_pr_status(IDENTITY, 1)
        service.get_pr_status(IDENTITY, 2)

        assert mock_gh.get_repo.call_count == 1
        assert mock_repo.get_pull.call_count == 2

    def test_only_pull_request_is_read(self, service_with_pull):
        """The repository handle is lazy, so each lookup is one request for the PR."""
        service, mock_gh, mock_repo = service_with_pull
        mock_repo.get_pull.return_value = make_pull("closed", merged=True)

        service.get_pr_status(IDENTITY, 7)

        assert mock_gh.get_repo.call_args.kwargs == {"lazy": True}
        mock_repo.get_pull.assert_called_once_with(7)


class TestGetPrHeadBranch:
    """Test head branch lookup for PR checkout."""

    def test_head_branch(self, service_with_pull):
        service, _, mock_repo = service_with_pull
        mock_repo.get_pull.return_value = make_pull(head_ref="fix-login")

        assert service.get_pr_head_branch(IDENTITY, 5) == "fix-login"

    def test_missing_head_branch(self, service_with_pull):
        service, _, mock_repo = service_with_pull
        mock_repo.get_pull.return_value = make_pull(head_ref="")

        with pytest.raises(RemoteError):
            service.get_pr_head_branch(IDENTITY, 5)


class TestClose:
    """Test resource cleanup."""

    def test_close_after_use(self, service_with_pull):
        service, mock_gh, mock_repo = service_with_pull
        mock_repo.get_pull.return_value = make_pull("open")
        service.get_pr_status(IDENTITY, 1)

        service.close()

        mock_gh.close.assert_called_once()
        assert service.github is None

    def test_close_without_client(self, mock_config):
        GitHubService(mock_config).close()
