"""Display and formatting service for worktree information"""
from datetime import datetime
from typing import List, TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from git_worktree_keeper.models.worktree import PRStatus, WorktreeRecord
from git_worktree_keeper.logging_config import get_logger

if TYPE_CHECKING:
    from git_worktree_keeper.core.worktree_keeper import CleanupReport

console = Console()
logger = get_logger(__name__)

# Row colors per classification (Rich color names)
DECISION_COLORS = {
    "remove": "red",
    "stale": "yellow",
    "active": None,
}


def format_pr(record: WorktreeRecord) -> str:
    """Format the PR column, e.g. '#123 (merged)'."""
    if not record.pr_number:
        return ""
    if record.pr_status is PRStatus.NONE:
        return f"#{record.pr_number}"
    return f"#{record.pr_number} ({record.pr_status.value})"


def format_last_commit(record: WorktreeRecord, now: datetime) -> str:
    """Format the last commit column, e.g. '2024-01-15 (12d)'."""
    days = record.days_since_commit(now)
    if days is None or record.last_commit_time is None:
        return "unknown"
    return f"{record.last_commit_time.strftime('%Y-%m-%d')} ({days}d)"


class DisplayService:
    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def display_stale_list(self, stale: List[WorktreeRecord], now: datetime) -> None:
        """Print stale worktrees as a numbered list for the removal prompt."""
        for i, record in enumerate(stale, start=1):
            console.print(f"  {i}. {record.name} ({record.branch or 'detached'})")
            days = record.days_since_commit(now)
            if days is None:
                console.print("     Last commit: unknown")
            else:
                console.print(f"     Last commit: {days} days ago")
            if record.pr_number and record.pr_status is not PRStatus.NONE:
                console.print(f"     PR #{record.pr_number} ({record.pr_status.value})")

    def display_worktree_table(self, report: "CleanupReport", now: datetime) -> None:
        """Display a table of every analysed worktree and its classification."""
        rows = (
            [(r, "remove") for r in report.to_remove]
            + [(r, "stale") for r in report.stale]
            + [(r, "active") for r in report.active]
        )
        if not rows:
            console.print("No worktrees found besides main.")
            return

        table = Table()
        table.add_column("Worktree")
        table.add_column("Branch")
        table.add_column("Last Commit")
        table.add_column("PR")
        table.add_column("Action")
        if self.verbose:
            table.add_column("Path")

        for record, decision in rows:
            cells = [
                record.name,
                record.branch or "(detached)",
                format_last_commit(record, now),
                format_pr(record),
                decision,
            ]
            if self.verbose:
                cells.append(record.path)
            table.add_row(*cells, style=DECISION_COLORS.get(decision))

        console.print(table)

        console.print("\nSummary:")
        console.print(f"Merged/closed PRs: {len(report.to_remove)}")
        console.print(f"Stale worktrees: {len(report.stale)}")
        console.print(f"Active worktrees: {len(report.active)}")
