"""Builders for pull requests, files and a scripted adapter."""

from datetime import datetime, timedelta, timezone
from typing import Dict, List
from unittest.mock import Mock

from bugmap.adapters.base import GitPlatformAdapter
from bugmap.models import FileChange, PullRequestSummary

NOW = datetime(2024, 7, 15, 12, 0, tzinfo=timezone.utc)


def make_pr(
    number: int,
    title: str = "chore: cleanup",
    merged_days_ago: int | None = 1,
    created_days_ago: int = 2,
) -> PullRequestSummary:
    merged_at = NOW - timedelta(days=merged_days_ago) if merged_days_ago is not None else None
    return PullRequestSummary(
        number=number,
        title=title,
        url=f"https://github.com/owner/repo/pull/{number}",
        created_at=NOW - timedelta(days=created_days_ago),
        merged_at=merged_at,
        user="octocat",
    )


def make_file(filename: str, **extra: object) -> FileChange:
    return FileChange(filename=filename, status="modified", **extra)


def scripted_adapter(
    pages: List[List[PullRequestSummary]],
    files: Dict[int, List[FileChange]] | None = None,
) -> Mock:
    """Adapter mock serving pages in order (then []) and files by pull number."""
    files = files or {}
    adapter = Mock(spec=GitPlatformAdapter)

    def list_pulls(repo: str, page: int, per_page: int, state: str = "closed") -> List[PullRequestSummary]:
        return pages[page - 1] if page <= len(pages) else []

    def list_pull_files(repo: str, pr_number: int, page: int, per_page: int) -> List[FileChange]:
        all_files = files.get(pr_number, [])
        start = (page - 1) * per_page
        return all_files[start : start + per_page]

    adapter.list_pulls.side_effect = list_pulls
    adapter.list_pull_files.side_effect = list_pull_files
    adapter.get_authenticated_login.return_value = "octocat"
    return adapter
