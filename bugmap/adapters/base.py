"""Abstract base for Git platform adapters."""

from abc import ABC, abstractmethod
from typing import List

from bugmap.models import FileChange, PullRequestSummary


class GitPlatformError(Exception):
    """Raised when a Git platform API call fails."""

    pass


class GitPlatformAdapter(ABC):
    """Read-only interface to a Git hosting platform."""

    @abstractmethod
    def get_authenticated_login(self) -> str:
        """Return the login of the user owning the credential."""
        ...

    @abstractmethod
    def list_pulls(
        self,
        repo: str,
        page: int,
        per_page: int,
        state: str = "closed",
    ) -> List[PullRequestSummary]:
        """Return one page of pull requests, newest first.

        An empty list means there are no more pages.
        """
        ...

    @abstractmethod
    def list_pull_files(
        self,
        repo: str,
        pr_number: int,
        page: int,
        per_page: int,
    ) -> List[FileChange]:
        """Return one page of the files changed by a pull request."""
        ...
