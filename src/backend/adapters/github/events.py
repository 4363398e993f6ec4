from __future__ import annotations

from datetime import datetime
from typing import Any, Union

from common.format_checker.models import EventAction, IssueEvent, PullRequestEvent


class GitHubEventAdapterError(ValueError):
    pass


WebhookEvent = Union[PullRequestEvent, IssueEvent]


def event_from_webhook(event_name: str, payload: Any) -> WebhookEvent | None:
    """
    Normalize a GitHub webhook delivery into a format checker event.

    Returns None for event types the checker does not handle and for ``issues``
    deliveries that actually describe a pull request.
    """
    if event_name == "pull_request":
        return pull_request_event_from_payload(payload)
    if event_name == "issues":
        return issue_event_from_payload(payload)
    return None


def pull_request_event_from_payload(payload: Any) -> PullRequestEvent:
    _require_dict(payload, "pull_request webhook payload")
    org, repo = _repo_identity(payload.get("repository"))
    return pull_request_event_from_api(
        org,
        repo,
        payload.get("pull_request"),
        action=payload.get("action"),
        label=_label_name(payload.get("label")),
    )


def issue_event_from_payload(payload: Any) -> IssueEvent | None:
    _require_dict(payload, "issues webhook payload")
    org, repo = _repo_identity(payload.get("repository"))
    issue = payload.get("issue")
    _require_dict(issue, "issue")
    if "pull_request" in issue:
        return None
    return issue_event_from_api(
        org,
        repo,
        issue,
        action=payload.get("action"),
        label=_label_name(payload.get("label")),
    )


def pull_request_event_from_api(
    org: str,
    repo: str,
    pull_request: Any,
    *,
    action: Any = EventAction.EDITED,
    label: str | None = None,
) -> PullRequestEvent:
    """Build an event from a pull request object (REST API and webhook share the shape)."""
    _require_dict(pull_request, "pull_request")
    base = pull_request.get("base") if isinstance(pull_request.get("base"), dict) else {}
    return PullRequestEvent(
        action=action,
        org=org,
        repo=repo,
        number=_require_number(pull_request),
        title=pull_request.get("title") or "",
        body=pull_request.get("body") or "",
        author=_login(pull_request.get("user")),
        created_at=_require_timestamp(pull_request.get("created_at")),
        base_branch=base.get("ref") or None,
        label=label,
    )


def issue_event_from_api(
    org: str,
    repo: str,
    issue: Any,
    *,
    action: Any = EventAction.EDITED,
    label: str | None = None,
) -> IssueEvent:
    _require_dict(issue, "issue")
    return IssueEvent(
        action=action,
        org=org,
        repo=repo,
        number=_require_number(issue),
        title=issue.get("title") or "",
        body=issue.get("body") or "",
        author=_login(issue.get("user")),
        created_at=_require_timestamp(issue.get("created_at")),
        label=label,
    )


def _require_dict(value: Any, what: str) -> None:
    if not isinstance(value, dict):
        raise GitHubEventAdapterError(f"{what} must be a JSON object.")


def _repo_identity(repository: Any) -> tuple[str, str]:
    _require_dict(repository, "repository")
    owner = _login(repository.get("owner"))
    name = repository.get("name")
    if not owner or not isinstance(name, str) or not name:
        full_name = repository.get("full_name")
        if isinstance(full_name, str) and full_name.count("/") == 1:
            owner, name = full_name.split("/")
    if not owner or not name:
        raise GitHubEventAdapterError("repository is missing owner/name.")
    return owner, name


def _login(user: Any) -> str:
    if isinstance(user, dict) and isinstance(user.get("login"), str):
        return user["login"]
    return ""


def _label_name(label: Any) -> str | None:
    if isinstance(label, dict) and isinstance(label.get("name"), str):
        return label["name"]
    return None


def _require_number(obj: dict[str, Any]) -> int:
    number = obj.get("number")
    if not isinstance(number, int) or isinstance(number, bool):
        raise GitHubEventAdapterError("number must be an integer.")
    return number


def _require_timestamp(value: Any) -> datetime:
    if isinstance(value, str) and value.strip():
        try:
            # GitHub uses a trailing "Z" which fromisoformat only accepts on 3.11+.
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            pass
    raise GitHubEventAdapterError(f"created_at is not an ISO-8601 timestamp: {value!r}")
