import json

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from api.github import _load_agent, get_config_agent, get_tracker, router
from common.format_checker.agent import ConfigAgent
from common.format_checker.config import parse_configuration
from format_checker_support import REGEXES, FakeTracker


CONFIG = {
    "format_checker": [
        {
            "repos": ["org/repo"],
            "required_match_rules": [
                {
                    "pull_request": True,
                    "title": True,
                    "regexp": REGEXES.issue_title,
                    "missing_label": "do-not-merge/invalid-title",
                    "missing_message": "Please follow the title format.",
                }
            ],
        }
    ]
}


@pytest.fixture
def tracker():
    return FakeTracker()


@pytest.fixture
def client(tracker):
    app = FastAPI()
    app.include_router(router)
    agent = ConfigAgent(parse_configuration(CONFIG))
    app.dependency_overrides[get_config_agent] = lambda: agent
    app.dependency_overrides[get_tracker] = lambda: tracker
    return TestClient(app)


def _pr_payload(title: str, action: str = "opened"):
    return {
        "action": action,
        "repository": {"name": "repo", "owner": {"login": "org"}},
        "pull_request": {
            "number": 1,
            "title": title,
            "body": "",
            "user": {"login": "zhang-san"},
            "created_at": "2021-12-01T12:00:00Z",
            "base": {"ref": "main"},
        },
    }


def test_invalid_title_gets_labelled_and_notified(client, tracker):
    resp = client.post(
        "/github/webhook",
        json=_pr_payload("fix the thing"),
        headers={"X-GitHub-Event": "pull_request"},
    )
    assert resp.status_code == 200
    assert resp.json() == {"status": "handled", "repo": "org/repo", "number": 1}
    assert tracker.labels_added == ["org/repo#1:do-not-merge/invalid-title"]
    assert len(tracker.comments_added) == 1


def test_unhandled_event_type_is_ignored(client, tracker):
    resp = client.post("/github/webhook", json={"zen": "Keep it simple."}, headers={"X-GitHub-Event": "ping"})
    assert resp.status_code == 200
    assert resp.json() == {"status": "ignored"}
    assert tracker.labels_added == []


def test_malformed_payload_is_rejected(client):
    payload = _pr_payload("fix the thing")
    del payload["repository"]
    resp = client.post("/github/webhook", json=payload, headers={"X-GitHub-Event": "pull_request"})
    assert resp.status_code == 400


def test_lookup_failure_maps_to_bad_gateway(client, tracker):
    tracker.lookup_error = ConnectionError("connection reset")
    resp = client.post(
        "/github/webhook",
        json=_pr_payload("[TI-12345] pkg: what's changed in the package"),
        headers={"X-GitHub-Event": "pull_request"},
    )
    assert resp.status_code == 502
    assert tracker.labels_added == []
    assert tracker.labels_removed == []


def test_help_endpoint_describes_repository(client):
    resp = client.get("/github/format-checker/help", params={"repo": "org/repo"})
    assert resp.status_code == 200
    assert "matched by regex" in resp.json()["config"]["org/repo"]


def test_help_endpoint_without_repositories(client):
    resp = client.get("/github/format-checker/help")
    assert resp.status_code == 200
    assert resp.json()["config"] == {}


def test_config_agent_requires_config_path():
    with pytest.raises(HTTPException) as excinfo:
        get_config_agent()
    assert excinfo.value.status_code == 500
    assert "FORMAT_CHECKER_CONFIG" in excinfo.value.detail


def test_config_agent_loads_configured_path(tmp_path, monkeypatch):
    path = tmp_path / "plugins.json"
    path.write_text(json.dumps(CONFIG), encoding="utf-8")
    monkeypatch.setenv("FORMAT_CHECKER_CONFIG", str(path))
    _load_agent.cache_clear()
    try:
        agent = get_config_agent()
        assert [r.missing_label for r in agent.config().rules_for("org", "repo")] == ["do-not-merge/invalid-title"]
    finally:
        _load_agent.cache_clear()
