"""Data models for pull requests and the files they change."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class Label(BaseModel):
    """Pull request label."""

    name: str = Field(..., description="Label name")
    description: Optional[str] = Field(default=None, description="Label description")

    model_config = {"frozen": True}


class GitRef(BaseModel):
    """Head or base reference of a pull request."""

    label: str = Field(default="", description="owner:branch label")
    sha: str = Field(default="", description="Commit SHA")

    model_config = {"frozen": True}


class PullRequestSummary(BaseModel):
    """Closed or merged pull request as returned by the list endpoint."""

    number: int = Field(..., gt=0, description="Pull request number")
    title: str = Field(default="", description="Pull request title")
    url: Optional[str] = Field(default=None, description="Web URL (html_url)")
    state: str = Field(default="closed", description="open or closed")
    created_at: datetime = Field(..., description="Creation time")
    merged_at: Optional[datetime] = Field(default=None, description="Merge time; None if closed without merge")
    merge_commit_sha: Optional[str] = Field(default=None, description="Merge commit SHA")
    labels: List[Label] = Field(default_factory=list)
    head: GitRef = Field(default_factory=GitRef)
    base: GitRef = Field(default_factory=GitRef)
    user: str = Field(default="", description="Author login")

    model_config = {"frozen": True}

    @property
    def activity_at(self) -> datetime:
        """Merge time, or creation time for pull requests closed without merge."""
        return self.merged_at or self.created_at


class FileChange(BaseModel):
    """File touched by a pull request.

    Only ``filename`` is interpreted; every other field the API returns
    (status, additions, deletions, patch, ...) is kept as-is.
    """

    filename: str = Field(..., min_length=1, description="Path relative to the repository root")

    model_config = {"frozen": True, "extra": "allow"}


class DecoratedFileChange(FileChange):
    """FileChange carrying a copy of the pull request that touched it."""

    pull: PullRequestSummary
