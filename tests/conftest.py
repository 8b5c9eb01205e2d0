"""Pytest fixtures for git-worktree-keeper tests"""
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import Mock
import pytest
import git

from git_worktree_keeper.models.worktree import WorktreeRecord
from git_worktree_keeper.services.git import WorktreeService
from git_worktree_keeper.services.github_service import GitHubService


NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def days_ago(days: int) -> datetime:
    """Commit time ``days`` whole days before NOW."""
    return NOW - timedelta(days=days)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_config():
    """Create a mock configuration dictionary."""
    return {
        'verbose': False,
        'debug': False,
        'stale_days': 30,
        'main_branches': ['main', 'master'],
        'dry_run': False,
        'github_token': 'test_token_for_testing',
        'remote_name': 'origin',
    }


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository for testing."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)

    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    # Rename master to main if needed
    try:
        repo.git.branch('-M', 'main')
    except Exception:
        pass

    repo.create_remote('origin', 'git@github.com:test/test-repo.git')

    yield repo

    repo.close()


@pytest.fixture
def git_repo_with_worktree(git_repo, temp_dir):
    """Repository with a PR branch checked out in a second worktree."""
    git_repo.git.branch('feature-pr-42')
    worktree_path = temp_dir / "feature-pr-42"
    git_repo.git.worktree('add', str(worktree_path), 'feature-pr-42')
    yield git_repo, worktree_path


SAMPLE_PORCELAIN = """worktree /home/dev/project
HEAD 1111111111111111111111111111111111111111
branch refs/heads/main

worktree /home/dev/worktrees/pr-123
HEAD 2222222222222222222222222222222222222222
branch refs/heads/fix-login

"""


@pytest.fixture
def sample_porcelain():
    return SAMPLE_PORCELAIN


@pytest.fixture
def mock_worktree_service():
    """A WorktreeService double with no worktrees and a GitHub remote."""
    service = Mock(spec=WorktreeService)
    service.list_worktrees = Mock(return_value=[])
    service.get_remote_url = Mock(return_value="git@github.com:test/repo.git")
    service.remove_worktree = Mock(return_value=(True, None))
    return service


@pytest.fixture
def mock_github_service():
    """A GitHubService double that reports every PR as open."""
    from git_worktree_keeper.models.worktree import PRStatus

    service = Mock(spec=GitHubService)
    service.enabled = True
    service.get_pr_status = Mock(return_value=PRStatus.OPEN)
    return service


@pytest.fixture
def make_record():
    """Factory for non-main worktree records."""
    def _make(name, branch=None, pr_number=None, age_days=1, **kwargs):
        return WorktreeRecord(
            path=f"/home/dev/worktrees/{name}",
            branch=name if branch is None else branch,
            pr_number=pr_number,
            last_commit_time=None if age_days is None else days_ago(age_days),
            **kwargs,
        )
    return _make


@pytest.fixture
def main_record():
    return WorktreeRecord(
        path="/home/dev/project", branch="main", last_commit_time=days_ago(0), is_main=True
    )
