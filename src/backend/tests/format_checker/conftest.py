import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import common...` work.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from datetime import datetime

import pytest

from common.format_checker.config import parse_configuration
from common.format_checker.models import IssueEvent, PullRequestEvent
from format_checker_support import EARLIER, FakeTracker


@pytest.fixture
def label():
    def _label(name: str, *, number: int = 1) -> str:
        return f"org/repo#{number}:{name}"

    return _label


@pytest.fixture
def make_tracker():
    def _make(*, labels=(), commits=(), issues=None, number: int = 1) -> FakeTracker:
        return FakeTracker(
            issues=issues,
            labels={number: list(labels)},
            commits={number: list(commits)},
        )

    return _make


@pytest.fixture
def make_config():
    def _make(rules, *, repos=("org/repo",)):
        return parse_configuration(
            {"format_checker": [{"repos": list(repos), "required_match_rules": list(rules)}]}
        )

    return _make


@pytest.fixture
def make_pr_event():
    def _make(
        *,
        action: str = "opened",
        title: str = "",
        body: str = "",
        branch: str | None = "main",
        created_at: datetime = EARLIER,
        author: str = "zhang-san",
        label: str | None = None,
        org: str = "org",
        repo: str = "repo",
        number: int = 1,
    ) -> PullRequestEvent:
        return PullRequestEvent(
            action=action,
            org=org,
            repo=repo,
            number=number,
            title=title,
            body=body,
            author=author,
            created_at=created_at,
            base_branch=branch,
            label=label,
        )

    return _make


@pytest.fixture
def make_issue_event():
    def _make(
        *,
        action: str = "opened",
        title: str = "",
        body: str = "",
        created_at: datetime = EARLIER,
        author: str = "zhang-san",
        label: str | None = None,
        number: int = 1,
    ) -> IssueEvent:
        return IssueEvent(
            action=action,
            org="org",
            repo="repo",
            number=number,
            title=title,
            body=body,
            author=author,
            created_at=created_at,
            label=label,
        )

    return _make
