"""Git platform adapters."""

from bugmap.adapters.base import GitPlatformAdapter, GitPlatformError
from bugmap.adapters.github import GitHubAdapter

__all__ = ["GitPlatformAdapter", "GitPlatformError", "GitHubAdapter"]
