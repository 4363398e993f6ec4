from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class TargetKind(str, Enum):
    PULL_REQUEST = "pull_request"
    ISSUE = "issue"


class EventAction(str, Enum):
    OPENED = "opened"
    EDITED = "edited"
    SYNCHRONIZE = "synchronize"
    REOPENED = "reopened"
    READY_FOR_REVIEW = "ready_for_review"
    LABELED = "labeled"
    UNLABELED = "unlabeled"
    # Anything GitHub sends that the checker does not react to (closed, assigned, ...).
    UNSUPPORTED = "unsupported"

    @classmethod
    def parse(cls, value: object) -> "EventAction":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return cls.UNSUPPORTED


class TriggerPolicy(str, Enum):
    # Re-evaluate every rule configured for the repository.
    FULL = "full"
    # Re-evaluate only the rules whose skip label is the label carried by the event.
    SKIP_LABEL_GATED = "skip_label_gated"


class Bypass(str, Enum):
    SKIP_LABEL = "skip_label"
    TRUSTED_USER = "trusted_user"


class _ItemEvent(BaseModel):
    action: EventAction
    org: str
    repo: str
    number: int
    title: str = ""
    body: str = ""
    author: str = ""
    created_at: datetime
    # Label added or removed by a labeled/unlabeled event.
    label: Optional[str] = None

    @field_validator("action", mode="before")
    @classmethod
    def _parse_action(cls, value: object) -> EventAction:
        return EventAction.parse(value)

    @field_validator("title", "body", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return "" if value is None else value

    @property
    def full_name(self) -> str:
        return f"{self.org}/{self.repo}"


class PullRequestEvent(_ItemEvent):
    base_branch: Optional[str] = None

    @property
    def kind(self) -> TargetKind:
        return TargetKind.PULL_REQUEST


class IssueEvent(_ItemEvent):
    @property
    def kind(self) -> TargetKind:
        return TargetKind.ISSUE


@dataclass(frozen=True)
class CheckableItem:
    """Snapshot of a pull request or issue taken while handling one event."""

    kind: TargetKind
    org: str
    repo: str
    number: int
    title: str
    body: str
    author: str
    created_at: datetime
    labels: frozenset[str] = frozenset()
    base_branch: Optional[str] = None
    commit_messages: tuple[str, ...] = ()

    @property
    def full_name(self) -> str:
        return f"{self.org}/{self.repo}"

    def has_label(self, name: str) -> bool:
        return name in self.labels


class TrackerIssue(BaseModel):
    """Tracker entity behind an issue number; pull requests share the same numbering."""

    number: int
    is_pull_request: bool = False


class EvaluationResult(BaseModel):
    applicable: bool
    satisfied: bool = False
    bypass: Optional[Bypass] = None
    violated_captures: List[str] = Field(default_factory=list)

    @classmethod
    def not_applicable(cls) -> "EvaluationResult":
        return cls(applicable=False)

    @classmethod
    def bypassed(cls, bypass: Bypass) -> "EvaluationResult":
        return cls(applicable=True, satisfied=True, bypass=bypass)


class LabelDiff(BaseModel):
    add: List[str] = Field(default_factory=list)
    remove: List[str] = Field(default_factory=list)
    comment: Optional[str] = None

    def is_empty(self) -> bool:
        return not self.add and not self.remove and not self.comment
