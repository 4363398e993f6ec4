"""Port used by the format checker to reach the issue tracker.

The engine only ever talks to this protocol; the GitHub implementation lives
in ``connectors.github`` and tests use an in-memory fake.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from .models import TrackerIssue


class IssueTracker(Protocol):
    def get_issue(self, org: str, repo: str, number: int) -> Optional[TrackerIssue]:
        """Return the entity numbered ``number`` or ``None`` when it does not exist."""
        ...

    def list_labels(self, org: str, repo: str, number: int) -> List[str]:
        ...

    def add_label(self, org: str, repo: str, number: int, label: str) -> None:
        ...

    def remove_label(self, org: str, repo: str, number: int, label: str) -> None:
        ...

    def create_comment(self, org: str, repo: str, number: int, body: str) -> None:
        ...

    def list_commit_messages(self, org: str, repo: str, number: int) -> List[str]:
        """Commit messages of a pull request, oldest first."""
        ...
