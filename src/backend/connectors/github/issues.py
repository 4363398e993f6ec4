from __future__ import annotations

from typing import Any, List, Optional
from urllib.parse import quote

from common.format_checker.models import TrackerIssue

from .client import GitHubHttpError, github_get, github_request
from .config import GitHubConfig

PAGE_SIZE = 100


class GitHubIssueTracker:
    """``IssueTracker`` backed by the GitHub REST API."""

    def __init__(self, config: GitHubConfig) -> None:
        self._config = config

    def get_issue(self, org: str, repo: str, number: int) -> Optional[TrackerIssue]:
        try:
            payload = self.fetch_issue(org, repo, number)
        except GitHubHttpError as exc:
            # 410 is returned for issues that were deleted or transferred away.
            if exc.status in (404, 410):
                return None
            raise
        return TrackerIssue(number=number, is_pull_request="pull_request" in payload)

    def list_labels(self, org: str, repo: str, number: int) -> List[str]:
        labels = self._paginate(f"{_issue_path(org, repo, number)}/labels")
        return [label["name"] for label in labels]

    def add_label(self, org: str, repo: str, number: int, label: str) -> None:
        github_request(
            self._config,
            "POST",
            f"{_issue_path(org, repo, number)}/labels",
            payload={"labels": [label]},
        )

    def remove_label(self, org: str, repo: str, number: int, label: str) -> None:
        try:
            github_request(
                self._config,
                "DELETE",
                f"{_issue_path(org, repo, number)}/labels/{quote(label, safe='')}",
            )
        except GitHubHttpError as exc:
            # Already gone; removing twice is not an error.
            if exc.status != 404:
                raise

    def create_comment(self, org: str, repo: str, number: int, body: str) -> None:
        github_request(
            self._config,
            "POST",
            f"{_issue_path(org, repo, number)}/comments",
            payload={"body": body},
        )

    def list_commit_messages(self, org: str, repo: str, number: int) -> List[str]:
        commits = self._paginate(f"{_repo_path(org, repo)}/pulls/{number}/commits")
        return [commit["commit"]["message"] for commit in commits]

    def fetch_issue(self, org: str, repo: str, number: int) -> dict[str, Any]:
        return github_get(self._config, _issue_path(org, repo, number))

    def fetch_pull_request(self, org: str, repo: str, number: int) -> dict[str, Any]:
        return github_get(self._config, f"{_repo_path(org, repo)}/pulls/{number}")

    def _paginate(self, path: str) -> List[dict[str, Any]]:
        items: List[dict[str, Any]] = []
        page = 1
        while True:
            batch = github_get(self._config, path, params={"per_page": PAGE_SIZE, "page": page}) or []
            items.extend(batch)
            if len(batch) < PAGE_SIZE:
                return items
            page += 1


def _repo_path(org: str, repo: str) -> str:
    return f"/repos/{quote(org, safe='')}/{quote(repo, safe='')}"


def _issue_path(org: str, repo: str, number: int) -> str:
    return f"{_repo_path(org, repo)}/issues/{number}"
