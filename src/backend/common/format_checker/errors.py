from __future__ import annotations


class FormatCheckerError(Exception):
    """Base class for errors raised by the format checker."""


class RuleConfigError(FormatCheckerError, ValueError):
    """A rule or rule set cannot be compiled; raised before any event is processed."""

    def __init__(self, message: str, *, repo: str | None = None, rule_index: int | None = None):
        location = []
        if repo:
            location.append(repo)
        if rule_index is not None:
            location.append(f"rule #{rule_index}")
        prefix = f"[{' '.join(location)}] " if location else ""
        super().__init__(f"{prefix}{message}")
        self.repo = repo
        self.rule_index = rule_index


class CrossReferenceLookupError(FormatCheckerError):
    """The tracker could not be asked whether a referenced issue exists."""

    def __init__(self, org: str, repo: str, number: int, cause: BaseException):
        super().__init__(f"Failed to look up {org}/{repo}#{number}: {cause}")
        self.org = org
        self.repo = repo
        self.number = number
