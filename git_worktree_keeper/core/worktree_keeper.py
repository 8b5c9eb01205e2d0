"""Core functionality for git-worktree-keeper"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Union

from rich.console import Console
from rich.markup import escape

from git_worktree_keeper.config import Config
from git_worktree_keeper.exceptions import ExecutionError, RemoteError, UserInputError
from git_worktree_keeper.models.repository import RepositoryIdentity
from git_worktree_keeper.models.worktree import PolicyDecision, PRStatus, WorktreeRecord
from git_worktree_keeper.services.display_service import DisplayService
from git_worktree_keeper.services.git import WorktreeService
from git_worktree_keeper.services.github_service import GitHubService
from git_worktree_keeper.logging_config import get_logger

console = Console()
logger = get_logger(__name__)


@dataclass
class CleanupReport:
    """Outcome of one clean run."""

    to_remove: list[WorktreeRecord] = field(default_factory=list)
    stale: list[WorktreeRecord] = field(default_factory=list)
    active: list[WorktreeRecord] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)  # (path, error_message)


def parse_stale_selection(response: str, count: int) -> list[int]:
    """Turn the reply to the stale prompt into 0-based indices.

    "all" selects everything, an empty reply selects nothing, otherwise the
    reply is a whitespace-separated list of 1-based indices. Tokens that are
    not integers or are out of range are ignored; repeats select once.

    Args:
        response: Raw text typed by the user
        count: Number of stale worktrees that were listed

    Returns:
        Selected indices in the order they were typed
    """
    response = response.strip()
    if not response:
        return []
    if response.lower() == "all":
        return list(range(count))

    selected: list[int] = []
    for token in response.split():
        try:
            index = _parse_index(token, count)
        except UserInputError as e:
            logger.debug(f"Ignoring selection {token!r}: {e}")
            continue
        if index not in selected:
            selected.append(index)
    return selected


def _parse_index(token: str, count: int) -> int:
    try:
        number = int(token)
    except ValueError:
        raise UserInputError(f"not a number: {token!r}")
    if number < 1 or number > count:
        raise UserInputError(f"out of range 1-{count}: {number}")
    return number - 1


class WorktreeKeeper:
    """Main class for analysing and cleaning up PR worktrees."""

    def __init__(
        self,
        repo_path: str,
        config: Union[Config, dict],
        worktree_service: Optional[WorktreeService] = None,
        github_service: Optional[GitHubService] = None,
    ):
        """Initialize WorktreeKeeper.

        Args:
            repo_path: Path to git repository
            config: Configuration dict or Config object
            worktree_service: Git worktree collaborator (created if omitted)
            github_service: GitHub collaborator (created if omitted)
        """
        self.repo_path = repo_path
        if isinstance(config, dict):
            self.config = Config.from_dict(config)
        else:
            self.config = config

        self.stale_days = self.config.stale_days
        self.dry_run = self.config.dry_run
        self.main_branches = self.config.main_branches

        self.worktree_service = worktree_service or WorktreeService(repo_path)
        self.github_service = github_service or GitHubService(self.config)
        self.display_service = DisplayService(verbose=self.config.verbose)

    # Analysis

    def get_repository_identity(self) -> Optional[RepositoryIdentity]:
        """Owner/name of the GitHub repository behind the configured remote.

        Returns None when the remote is missing, is not on GitHub, or no
        token is available, in which case PR checks are skipped.
        """
        remote_url = self.worktree_service.get_remote_url(self.config.remote_name)
        if not remote_url:
            logger.info(f"No '{self.config.remote_name}' remote found")
            return None

        identity = RepositoryIdentity.from_remote_url(remote_url)
        if identity is None:
            logger.info(f"Non-GitHub repository detected ({remote_url}). PR detection disabled.")
            return None

        if not self.github_service.enabled:
            logger.info("GitHub token not found. PR detection disabled.")
            return None

        logger.info(f"[GitHub] Checking PRs in {identity.full_name}")
        return identity

    def is_primary(self, record: WorktreeRecord) -> bool:
        """Whether ``record`` is the main checkout, which is never cleaned."""
        return (
            record.is_main
            or ".git" in record.path.split("/")
            or record.branch in self.main_branches
        )

    def resolve_pr_status(
        self, record: WorktreeRecord, identity: Optional[RepositoryIdentity]
    ) -> PRStatus:
        """Look up and store the PR status of ``record``.

        Failures leave the status as NONE; they never abort the run.
        """
        if not record.pr_number or identity is None:
            return record.pr_status

        try:
            record.pr_status = self.github_service.get_pr_status(identity, record.pr_number)
        except RemoteError as e:
            logger.debug(f"[GitHub] Could not get status of PR #{record.pr_number}: {e}")
            record.pr_status = PRStatus.NONE
        return record.pr_status

    def classify(
        self,
        record: WorktreeRecord,
        identity: Optional[RepositoryIdentity],
        now: Optional[datetime] = None,
    ) -> PolicyDecision:
        """Decide whether a worktree should be removed, reviewed, or kept.

        Merged and closed PRs win over staleness. A worktree whose last
        commit time is unknown (detached, bare, or the lookup failed) is
        treated as stale so it is offered for review.
        """
        now = now or datetime.now(timezone.utc)

        status = self.resolve_pr_status(record, identity)
        if status in (PRStatus.MERGED, PRStatus.CLOSED):
            return PolicyDecision.REMOVE

        days = record.days_since_commit(now)
        if days is None or days > self.stale_days:
            return PolicyDecision.STALE

        return PolicyDecision.ACTIVE

    def analyze(self, now: Optional[datetime] = None) -> CleanupReport:
        """Enumerate and classify every non-primary worktree.

        Raises:
            ExecutionError: the worktree list could not be obtained
        """
        now = now or datetime.now(timezone.utc)

        try:
            records = self.worktree_service.list_worktrees()
        except ExecutionError as e:
            raise ExecutionError("worktree_info", f"failed to get worktree info: {e}") from e

        report = CleanupReport()
        candidates = [r for r in records if not self.is_primary(r)]
        logger.info(f"[WORKTREE] {len(candidates)} of {len(records)} worktrees to check")
        if not candidates:
            return report

        identity = self.get_repository_identity()
        if identity is None:
            console.print(
                "[yellow]⚠ Could not get current repository - skipping PR status checks[/yellow]"
            )

        for record in candidates:
            decision = self.classify(record, identity, now)
            logger.info(f"[POLICY] {record.name}: {decision.value}")
            if decision is PolicyDecision.REMOVE:
                report.to_remove.append(record)
            elif decision is PolicyDecision.STALE:
                report.stale.append(record)
            else:
                report.active.append(record)

        return report

    # Removal

    def remove_worktrees(self, records: list) -> tuple[list, list]:
        """Force-remove each worktree, isolating failures.

        Returns:
            Tuple of (removed_paths, failed) where failed holds
            (path, error_message) pairs
        """
        removed = []
        failed = []
        for record in records:
            success, error_message = self.worktree_service.remove_worktree(record.path, force=True)
            if success:
                removed.append(record.path)
            else:
                failed.append((record.path, error_message or "Unknown error"))
        return removed, failed

    def _remove_merged(self, report: CleanupReport) -> None:
        console.print(
            f"\n[bold]Found {len(report.to_remove)} worktree(s) for merged/closed PRs:[/bold]\n"
        )
        for record in report.to_remove:
            console.print(
                f"  • {record.name} (PR #{record.pr_number} - {record.pr_status.value})"
            )
            if self.dry_run:
                continue
            removed, failed = self.remove_worktrees([record])
            report.removed.extend(removed)
            report.failed.extend(failed)
            for _, error in failed:
                console.print(f"    [red]✗ Failed to remove: {escape(error)}[/red]")
            if removed:
                console.print("    [green]✓ Removed[/green]")

        if self.dry_run:
            console.print("\n[dim](Dry run - no worktrees were removed)[/dim]")

    def _review_stale(self, report: CleanupReport, now: datetime) -> None:
        console.print(
            f"\n[bold]Found {len(report.stale)} stale worktree(s) "
            f"(no commits in {self.stale_days}+ days):[/bold]\n"
        )
        self.display_service.display_stale_list(report.stale, now)

        if self.dry_run:
            return

        response = self._ask(
            "\nWould you like to remove any of these? Enter numbers separated by spaces "
            "(or 'all' for all, Enter to skip): "
        )
        for index in parse_stale_selection(response, len(report.stale)):
            record = report.stale[index]
            removed, failed = self.remove_worktrees([record])
            report.removed.extend(removed)
            report.failed.extend(failed)
            for _, error in failed:
                console.print(f"[red]✗ Failed to remove {record.name}: {escape(error)}[/red]")
            if removed:
                console.print(f"[green]✓ Removed {record.name}[/green]")

    def _ask(self, prompt: str) -> str:
        """Read one line from the user; end of input counts as no answer."""
        try:
            return console.input(prompt)
        except EOFError:
            return ""

    def clean(self, now: Optional[datetime] = None) -> CleanupReport:
        """Remove worktrees of merged/closed PRs and offer to remove stale ones."""
        now = now or datetime.now(timezone.utc)
        console.print("Analyzing worktrees...")

        report = self.analyze(now)
        if not (report.to_remove or report.stale or report.active):
            console.print("No worktrees found besides main.")
            return report

        if report.to_remove:
            self._remove_merged(report)

        if report.stale:
            self._review_stale(report, now)

        if not report.to_remove and not report.stale:
            console.print("[green]All worktrees are active and up to date![/green]")

        return report

    def show(self, now: Optional[datetime] = None) -> CleanupReport:
        """Display every worktree and what clean would do with it."""
        now = now or datetime.now(timezone.utc)
        report = self.analyze(now)
        self.display_service.display_worktree_table(report, now)
        return report

    # Creation

    def add_worktree(
        self, branch: str, path: Optional[str] = None, append_branch: bool = False
    ) -> str:
        """Create a worktree for an existing branch and report where it is."""
        target = self.worktree_service.add_worktree(branch, path, append_branch)
        console.print(f"[green]✓ Created worktree for {branch} at {target}[/green]")
        return target

    def checkout_pr(
        self, pr_number: int, path: Optional[str] = None, append_branch: bool = False
    ) -> str:
        """Fetch a pull request and create a worktree for its head branch.

        Raises:
            RemoteError: the repository or PR could not be resolved
            ExecutionError: fetching or creating the worktree failed
        """
        identity = self.get_repository_identity()
        if identity is None:
            raise RemoteError(
                "get_pull", "could not determine the GitHub repository or no token is set"
            )

        branch = self.github_service.get_pr_head_branch(identity, pr_number)
        existing = self.worktree_service.get_worktree_path_for_branch(branch)
        if existing:
            console.print(f"[yellow]PR #{pr_number} already checked out at: {existing}[/yellow]")
            return existing

        self.worktree_service.fetch_pull_request(self.config.remote_name, pr_number, branch)
        return self.add_worktree(branch, path, append_branch)

    def close(self) -> None:
        """Clean up resources and close connections."""
        logger.debug("Closing WorktreeKeeper resources")
        self.github_service.close()
