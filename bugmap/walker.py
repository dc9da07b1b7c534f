"""Page walker: collect matching pull requests page by page, newest first.

The walk stops on the first empty page (EXHAUSTED) or once the first pull
request of a page is older than the cutoff (EXPIRED). An expired page is
still filtered; only further pages are skipped.
"""

import calendar
import logging
from datetime import datetime
from enum import Enum
from typing import List

from bugmap.adapters.base import GitPlatformAdapter
from bugmap.matcher import BugMatcher
from bugmap.models import PullRequestSummary

LOG = logging.getLogger("bugmap.walker")

MAX_PAGE_SIZE = 100
DEFAULT_RETENTION_MONTHS = 6


class WalkState(str, Enum):
    FETCHING = "fetching"
    EXHAUSTED = "exhausted"
    EXPIRED = "expired"
    DONE = "done"


def retention_cutoff(now: datetime, months: int = DEFAULT_RETENTION_MONTHS) -> datetime:
    """Return now minus the given number of calendar months.

    The day is clamped to the length of the target month (Aug 31 -> Feb 28).
    """
    total = now.year * 12 + (now.month - 1) - months
    year, month0 = divmod(total, 12)
    day = min(now.day, calendar.monthrange(year, month0 + 1)[1])
    return now.replace(year=year, month=month0 + 1, day=day)


class PageWalker:
    """Walks the closed pull requests of one repository until data or time runs out."""

    def __init__(
        self,
        adapter: GitPlatformAdapter,
        repository: str,
        matcher: BugMatcher,
        cutoff: datetime,
        state: str = "closed",
        merged_only: bool = False,
    ) -> None:
        self._adapter = adapter
        self._repository = repository
        self._matcher = matcher
        self._cutoff = cutoff
        self._pr_state = state
        self._merged_only = merged_only
        self.state = WalkState.FETCHING
        self.stop_reason: WalkState | None = None
        self.pages_fetched = 0

    @property
    def cutoff(self) -> datetime:
        return self._cutoff

    def walk(self, start_page: int = 1, page_size: int = MAX_PAGE_SIZE) -> List[PullRequestSummary]:
        """Fetch pages from start_page on and return the matching pull requests.

        Raises:
            ValueError: If start_page < 1 or page_size is outside 1..100
            GitPlatformError: If a page request fails
        """
        if start_page < 1:
            raise ValueError(f"start_page must be >= 1, got {start_page}")
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}")

        self.state = WalkState.FETCHING
        self.stop_reason = None
        self.pages_fetched = 0
        page = start_page
        matched: List[PullRequestSummary] = []

        while self.state is WalkState.FETCHING:
            pulls = self._adapter.list_pulls(self._repository, page=page, per_page=page_size, state=self._pr_state)
            self.pages_fetched += 1
            if not pulls:
                self.state = WalkState.EXHAUSTED
                LOG.info("Page %s is empty, no more pull requests (%s matched)", page, len(matched))
                break

            first_seen = pulls[0].activity_at
            if first_seen < self._cutoff:
                self.state = WalkState.EXPIRED
                LOG.info(
                    "Reached cutoff %s on page %s (first pull request #%s at %s)",
                    self._cutoff.isoformat(),
                    page,
                    pulls[0].number,
                    first_seen.isoformat(),
                )

            found = self._matcher.filter(pulls)
            if self._merged_only:
                found = [pr for pr in found if pr.merged_at is not None]
            matched.extend(found)
            LOG.debug("Page %s: %s pull requests, %s matched", page, len(pulls), len(found))
            page += 1

        self.stop_reason = self.state
        self.state = WalkState.DONE
        LOG.info("Collected %s matching pull requests from %s pages", len(matched), self.pages_fetched)
        return matched
