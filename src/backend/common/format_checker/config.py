from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import RuleConfigError
from .models import TargetKind
from .patterns import compile_pattern

# Identity used to prove that a templated pattern renders and compiles at load time.
_PROBE_ORG = "org"
_PROBE_REPO = "repo"


class RequiredMatchRule(BaseModel):
    """One compliance requirement: text that must match, or a label that gets applied."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Target kinds.
    pull_request: bool = False
    issue: bool = False

    # Corpora; the rule is satisfied if any enabled corpus matches.
    title: bool = False
    body: bool = False
    commit_message: bool = False

    regexp: str
    missing_label: str
    missing_message: str = ""
    skip_label: str = ""
    trusted_users: Tuple[str, ...] = ()
    branches: Tuple[str, ...] = ()
    start_time: Optional[datetime] = None

    @field_validator("start_time")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_validator("missing_label", "regexp")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @model_validator(mode="after")
    def _check_meaningful(self) -> "RequiredMatchRule":
        if not (self.pull_request or self.issue):
            raise ValueError("rule must target pull requests, issues or both")
        if not (self.title or self.body or self.commit_message):
            raise ValueError("rule must check at least one of title, body or commit messages")
        if self.commit_message and not self.pull_request:
            raise ValueError("commit messages can only be checked on pull requests")
        compile_pattern(self.regexp, _PROBE_ORG, _PROBE_REPO)
        return self

    @property
    def target_kinds(self) -> frozenset[TargetKind]:
        kinds = set()
        if self.pull_request:
            kinds.add(TargetKind.PULL_REQUEST)
        if self.issue:
            kinds.add(TargetKind.ISSUE)
        return frozenset(kinds)


class FormatCheckerEntry(BaseModel):
    """Rules shared by a group of repositories (``org/repo``) or whole organizations (``org``)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    repos: Tuple[str, ...] = ()
    required_match_rules: Tuple[RequiredMatchRule, ...] = ()

    @field_validator("repos")
    @classmethod
    def _check_repos(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        for name in value:
            parts = name.split("/")
            if len(parts) > 2 or not all(p.strip() for p in parts):
                raise ValueError(f"invalid repository {name!r}, expected 'org' or 'org/repo'")
        return value

    def covers(self, org: str, repo: str) -> bool:
        return f"{org}/{repo}" in self.repos or org in self.repos


class FormatCheckerConfiguration(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    format_checker: Tuple[FormatCheckerEntry, ...] = Field(default_factory=tuple)

    def rules_for(self, org: str, repo: str) -> List[RequiredMatchRule]:
        """Rules that apply to ``org/repo`` in configuration order."""
        rules: List[RequiredMatchRule] = []
        for entry in self.format_checker:
            if entry.covers(org, repo):
                rules.extend(entry.required_match_rules)
        return rules


def parse_configuration(raw: Any) -> FormatCheckerConfiguration:
    if raw is None:
        return FormatCheckerConfiguration()
    try:
        return FormatCheckerConfiguration.model_validate(raw)
    except ValidationError as exc:
        raise RuleConfigError(f"Invalid format checker configuration:\n{exc}") from exc


def load_configuration(path: str | Path) -> FormatCheckerConfiguration:
    """Load a YAML (or ``.json``) configuration file."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            raw = json.loads(text)
        else:
            raw = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise RuleConfigError(f"Cannot parse {path}: {exc}") from exc
    return parse_configuration(raw)
