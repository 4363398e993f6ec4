from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()

DEFAULT_API_URL = "https://api.github.com"


@dataclass(frozen=True)
class GitHubConfig:
    base_url: str
    token: str


def get_github_config() -> GitHubConfig:
    """
    Load GitHub connector configuration from environment variables.

    Reads:
      GITHUB_TOKEN (required), GITHUB_API_URL (defaults to the public API)
    """
    base_url = os.getenv("GITHUB_API_URL", DEFAULT_API_URL).strip() or DEFAULT_API_URL
    return GitHubConfig(
        base_url=base_url.rstrip("/"),
        token=_require_env("GITHUB_TOKEN"),
    )


def format_checker_config_path() -> str:
    return _require_env("FORMAT_CHECKER_CONFIG")


def _require_env(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise ValueError(f"Missing required environment variable: {name}")
    return value
