"""GitHub API adapter."""

import logging
from typing import Any, Dict, List

import requests

from bugmap.adapters.base import GitPlatformAdapter, GitPlatformError
from bugmap.models import FileChange, GitRef, Label, PullRequestSummary

LOG = logging.getLogger("bugmap.adapters.github")


def _ref_from_api(data: Dict[str, Any] | None) -> GitRef:
    data = data or {}
    return GitRef(label=data.get("label") or "", sha=data.get("sha") or "")


def _pr_from_api(data: Dict[str, Any]) -> PullRequestSummary:
    user = data.get("user") or {}
    labels = [
        Label(name=lb["name"], description=lb.get("description"))
        for lb in (data.get("labels") or [])
        if isinstance(lb, dict) and "name" in lb
    ]
    return PullRequestSummary(
        number=data["number"],
        title=data.get("title") or "",
        url=data.get("html_url"),
        state=data.get("state", "closed"),
        created_at=data["created_at"],
        merged_at=data.get("merged_at"),
        merge_commit_sha=data.get("merge_commit_sha"),
        labels=labels,
        head=_ref_from_api(data.get("head")),
        base=_ref_from_api(data.get("base")),
        user=user.get("login", ""),
    )


def _file_from_api(data: Dict[str, Any]) -> FileChange:
    return FileChange.model_validate(data)


class GitHubAdapter(GitPlatformAdapter):
    """GitHub REST API implementation of GitPlatformAdapter."""

    def __init__(
        self,
        token: str | None = None,
        api_url: str = "https://api.github.com",
    ) -> None:
        self.token = token
        self.api_url = api_url.rstrip("/")
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    def _request(self, method: str, path: str, **kwargs: object) -> requests.Response:
        url = f"{self.api_url}{path}"
        LOG.debug("HTTP %s %s %s", method, url, kwargs.get("params") or "")
        try:
            resp = self._session.request(method, url, timeout=30, **kwargs)
        except requests.RequestException as e:
            raise GitPlatformError(f"Request to {path} failed: {e}") from e
        if resp.status_code == 404:
            raise GitPlatformError(f"Not found: {path}")
        if resp.status_code >= 400:
            msg = resp.text
            try:
                data = resp.json()
                if "message" in data:
                    msg = data["message"]
            except Exception:
                pass
            raise GitPlatformError(f"GitHub API error {resp.status_code}: {msg}")
        return resp

    def get_authenticated_login(self) -> str:
        """Return the login of the token owner (GET /user)."""
        data = self._request("GET", "/user").json()
        return data.get("login", "")

    def list_pulls(
        self,
        repo: str,
        page: int,
        per_page: int,
        state: str = "closed",
    ) -> List[PullRequestSummary]:
        """List one page of pull requests, most recently created first.

        Args:
            repo: Repository in format owner/repo
            page: 1-based page number
            per_page: Page size (GitHub caps it at 100)
            state: open, closed or all

        Returns:
            Pull requests of that page; empty once past the last page

        Raises:
            GitPlatformError: If the API call fails
        """
        params = {
            "state": state,
            "per_page": per_page,
            "page": page,
            "sort": "created",
            "direction": "desc",
        }
        resp = self._request("GET", f"/repos/{repo}/pulls", params=params)
        return [_pr_from_api(d) for d in resp.json() or []]

    def list_pull_files(
        self,
        repo: str,
        pr_number: int,
        page: int,
        per_page: int,
    ) -> List[FileChange]:
        """List one page of files changed by a pull request."""
        params = {"per_page": per_page, "page": page}
        resp = self._request("GET", f"/repos/{repo}/pulls/{pr_number}/files", params=params)
        return [_file_from_api(d) for d in resp.json() or []]
