from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, List

from fastapi import APIRouter, Body, Depends, Header, HTTPException, Query
from pydantic import ValidationError

from adapters.github.events import GitHubEventAdapterError, event_from_webhook
from common.format_checker.agent import ConfigAgent
from common.format_checker.dispatcher import handle
from common.format_checker.errors import CrossReferenceLookupError, RuleConfigError
from common.format_checker.help import help_provider
from common.format_checker.ports import IssueTracker
from connectors.github.client import GitHubHttpError
from connectors.github.config import format_checker_config_path, get_github_config
from connectors.github.issues import GitHubIssueTracker


LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/github", tags=["github"])


@lru_cache(maxsize=1)
def _load_agent(path: str) -> ConfigAgent:
    agent = ConfigAgent()
    agent.load(path)
    return agent


def get_config_agent() -> ConfigAgent:
    try:
        path = format_checker_config_path()
    except ValueError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    agent = _load_agent(path)
    try:
        agent.reload_if_changed()
    except (OSError, RuleConfigError):
        LOGGER.exception("Configuration reload failed; keeping the previous rules")
    return agent


def get_tracker() -> IssueTracker:
    try:
        return GitHubIssueTracker(get_github_config())
    except ValueError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.post("/webhook")
def github_webhook(
    payload: dict[str, Any] = Body(...),
    x_github_event: str = Header(default=""),
    agent: ConfigAgent = Depends(get_config_agent),
    tracker: IssueTracker = Depends(get_tracker),
):
    try:
        event = event_from_webhook(x_github_event, payload)
    except (GitHubEventAdapterError, ValidationError) as exc:
        raise HTTPException(status_code=400, detail=f"Malformed {x_github_event} payload: {exc}") from exc

    if event is None:
        LOGGER.debug("Ignoring GitHub event %r", x_github_event)
        return {"status": "ignored"}

    try:
        handle(tracker, event, agent.config())
    except (CrossReferenceLookupError, GitHubHttpError) as exc:
        LOGGER.error("Failed to handle %s event for %s#%d: %s", x_github_event, event.full_name, event.number, exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return {"status": "handled", "repo": event.full_name, "number": event.number}


@router.get("/format-checker/help")
def format_checker_help(
    repo: List[str] = Query(default=[]),
    agent: ConfigAgent = Depends(get_config_agent),
):
    return help_provider(agent.config(), repo).model_dump()
