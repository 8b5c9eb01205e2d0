"""Infer a pull request number from branch and directory names."""

import re
from typing import Optional

# Most specific patterns first. Order matters: the first rule that matches
# wins, even when a later rule would find a different number.
PR_NUMBER_PATTERNS = [
    re.compile(r"[-_]pr[-_/](\d+)", re.ASCII),    # web-frontend-pr-1018, x_pr_12, x-pr/12
    re.compile(r"^pr[-_/](\d+)", re.ASCII),       # pr-123, pr_123, pr/123
    re.compile(r"[-_]pull[-_/](\d+)", re.ASCII),  # fix-pull-123, fix_pull_123
    re.compile(r"^pull[-_/](\d+)", re.ASCII),     # pull-123, pull_123, pull/123
    re.compile(r"^(\d+)[-_]", re.ASCII),          # 123-feature
    re.compile(r"[-_](\d{4,})$", re.ASCII),       # feature-1234 (4+ digits to avoid version suffixes)
]


def extract_pr_number(text: Optional[str]) -> Optional[int]:
    """Return the PR number encoded in ``text``, or None.

    Args:
        text: A branch name or the final segment of a worktree path

    Returns:
        The number captured by the first matching rule, or None when no rule
        matches or the captured number is zero
    """
    if not text:
        return None

    for pattern in PR_NUMBER_PATTERNS:
        match = pattern.search(text)
        if match:
            number = int(match.group(1))
            return number or None
    return None
