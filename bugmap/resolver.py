"""Fetch the files changed by each pull request and tag them with it."""

import logging
from typing import Iterable, List

from bugmap.adapters.base import GitPlatformAdapter
from bugmap.models import DecoratedFileChange, FileChange, PullRequestSummary

LOG = logging.getLogger("bugmap.resolver")


def decorate(pull: PullRequestSummary, files: Iterable[FileChange]) -> List[DecoratedFileChange]:
    """Attach a copy of pull to every file, keeping the file order."""
    return [
        DecoratedFileChange(**f.model_dump(), pull=pull.model_copy(deep=True))
        for f in files
    ]


class FileResolver:
    """Resolves pull requests into their changed files, one pull request at a time."""

    def __init__(self, adapter: GitPlatformAdapter, repository: str, page_size: int = 100) -> None:
        self._adapter = adapter
        self._repository = repository
        self._page_size = page_size

    def fetch_files(self, pull: PullRequestSummary) -> List[FileChange]:
        """All files of one pull request, following pages until a short or empty one."""
        files: List[FileChange] = []
        page = 1
        while True:
            batch = self._adapter.list_pull_files(
                self._repository, pull.number, page=page, per_page=self._page_size
            )
            files.extend(batch)
            if len(batch) < self._page_size:
                return files
            page += 1

    def resolve(self, pulls: Iterable[PullRequestSummary]) -> List[DecoratedFileChange]:
        """Decorated files of all pulls, in pull request order then file order."""
        resolved: List[DecoratedFileChange] = []
        for pull in pulls:
            resolved.extend(decorate(pull, self.fetch_files(pull)))
            LOG.info("Pulled files for #%s (%s files so far)", pull.number, len(resolved))
        return resolved
