from __future__ import annotations

import json
import time
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from .config import GitHubConfig

API_VERSION = "2022-11-28"

# A POST that fails with 5xx or a timeout may still have been applied.
RETRYABLE_METHODS = frozenset({"GET", "HEAD", "PUT", "DELETE"})


class GitHubHttpError(RuntimeError):
    def __init__(self, status: int, message: str, body: str | None = None):
        super().__init__(f"GitHub HTTP {status}: {message}")
        self.status = status
        self.body = body


def github_request(
    config: GitHubConfig,
    method: str,
    path: str,
    *,
    params: dict[str, Any] | None = None,
    payload: Any = None,
    timeout_seconds: int = 30,
    max_retries: int = 3,
) -> Any:
    """
    Perform an authenticated request against the GitHub REST API and decode the JSON reply.

    Rate limiting (429), server errors and connection failures are retried with
    exponential backoff for idempotent methods only; every other failure is
    raised as ``GitHubHttpError``.
    """
    retries = 0
    if method.upper() not in RETRYABLE_METHODS:
        max_retries = 0
    backoff = 0.5
    data = json.dumps(payload).encode("utf-8") if payload is not None else None

    while True:
        req = Request(_build_url(config.base_url, path, params), data=data, method=method)
        req.add_header("Accept", "application/vnd.github+json")
        req.add_header("Authorization", f"Bearer {config.token}")
        req.add_header("X-GitHub-Api-Version", API_VERSION)
        if data is not None:
            req.add_header("Content-Type", "application/json")

        try:
            with urlopen(req, timeout=timeout_seconds) as resp:
                raw = resp.read().decode("utf-8")
                return json.loads(raw) if raw else None
        except HTTPError as exc:
            body = exc.read().decode("utf-8") if exc.fp else None
            status = exc.code

            if status in (429, 500, 502, 503, 504) and retries < max_retries:
                time.sleep(backoff)
                retries += 1
                backoff *= 2
                continue

            raise GitHubHttpError(status, exc.reason, body) from exc
        except URLError as exc:
            if retries < max_retries:
                time.sleep(backoff)
                retries += 1
                backoff *= 2
                continue
            raise GitHubHttpError(0, str(exc)) from exc


def github_get(config: GitHubConfig, path: str, *, params: dict[str, Any] | None = None) -> Any:
    return github_request(config, "GET", path, params=params)


def _build_url(base_url: str, path: str, params: dict[str, Any] | None) -> str:
    normalized_path = path if path.startswith("/") else f"/{path}"
    url = f"{base_url.rstrip('/')}{normalized_path}"
    if params:
        url = f"{url}?{urlencode(params)}"
    return url
