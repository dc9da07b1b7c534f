"""One scan run: walk pull requests, resolve their files, group by filename."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import AbstractSet, Dict, List

from bugmap.adapters.base import GitPlatformAdapter
from bugmap.aggregator import aggregate
from bugmap.config import AppConfig
from bugmap.matcher import BugMatcher, bug_id_pattern
from bugmap.models import DecoratedFileChange, PullRequestSummary
from bugmap.resolver import FileResolver
from bugmap.walker import PageWalker, WalkState, retention_cutoff

LOG = logging.getLogger("bugmap.scan")


@dataclass
class ScanReport:
    """Outcome of a scan: the document plus what produced it."""

    document: Dict[str, List[str]]
    cutoff: datetime
    stop_reason: WalkState | None = None
    pages_fetched: int = 0
    pulls: List[PullRequestSummary] = field(default_factory=list)
    files: List[DecoratedFileChange] = field(default_factory=list)


def run_scan(
    adapter: GitPlatformAdapter,
    config: AppConfig,
    known_ids: AbstractSet[str],
    now: datetime | None = None,
) -> ScanReport:
    """Run the walker, resolver and aggregator for the configured repository.

    The cutoff is computed once from now (default: current UTC time; a naive
    now is taken as UTC).
    GitPlatformError from any request propagates; nothing is kept on failure.
    """
    scan = config.scan
    repository = config.github.repository
    now = now or datetime.now(UTC)
    now = now.replace(tzinfo=UTC) if now.tzinfo is None else now.astimezone(UTC)
    cutoff = retention_cutoff(now, scan.retention_months)

    matcher = BugMatcher(known_ids, bug_id_pattern(scan.bug_prefix, known_ids))
    walker = PageWalker(
        adapter,
        repository,
        matcher,
        cutoff,
        state=scan.state,
        merged_only=scan.merged_only,
    )
    LOG.info("Scanning %s for pull requests newer than %s", repository, cutoff.date().isoformat())
    pulls = walker.walk(start_page=scan.start_page, page_size=scan.page_size)

    resolver = FileResolver(adapter, repository, page_size=scan.files_page_size)
    files = resolver.resolve(pulls)
    LOG.info("Fetched %s files from %s pull requests", len(files), len(pulls))

    return ScanReport(
        document=aggregate(files),
        cutoff=cutoff,
        stop_reason=walker.stop_reason,
        pages_fetched=walker.pages_fetched,
        pulls=pulls,
        files=files,
    )
