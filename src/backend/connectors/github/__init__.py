"""GitHub connector (network + auth lives here; payload adapters live in src/backend/adapters/github)."""

from .client import GitHubHttpError
from .config import GitHubConfig, get_github_config
from .issues import GitHubIssueTracker

__all__ = ["GitHubConfig", "GitHubHttpError", "GitHubIssueTracker", "get_github_config"]
