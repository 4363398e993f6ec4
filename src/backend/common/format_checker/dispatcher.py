"""Event entry points.

Each event is handled synchronously: pick the rules the action can affect,
evaluate them all, then apply the resulting label diff. Nothing is mutated
until every rule has been evaluated, so a failed issue lookup leaves the
item untouched.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import timezone
from typing import Dict, List, Sequence, Union

from .config import FormatCheckerConfiguration, RequiredMatchRule
from .evaluator import evaluate_rule, needs_commit_messages
from .models import (
    CheckableItem,
    EventAction,
    IssueEvent,
    LabelDiff,
    PullRequestEvent,
    TargetKind,
    TriggerPolicy,
)
from .ports import IssueTracker
from .reconciler import reconcile
from .validator import CrossReferenceValidator

LOGGER = logging.getLogger(__name__)

ItemEvent = Union[PullRequestEvent, IssueEvent]

TRIGGER_POLICIES: Dict[TargetKind, Dict[EventAction, TriggerPolicy]] = {
    TargetKind.PULL_REQUEST: {
        EventAction.OPENED: TriggerPolicy.FULL,
        EventAction.EDITED: TriggerPolicy.FULL,
        EventAction.SYNCHRONIZE: TriggerPolicy.FULL,
        EventAction.REOPENED: TriggerPolicy.FULL,
        EventAction.READY_FOR_REVIEW: TriggerPolicy.FULL,
        EventAction.LABELED: TriggerPolicy.SKIP_LABEL_GATED,
        EventAction.UNLABELED: TriggerPolicy.SKIP_LABEL_GATED,
    },
    TargetKind.ISSUE: {
        EventAction.OPENED: TriggerPolicy.FULL,
        EventAction.EDITED: TriggerPolicy.FULL,
        EventAction.REOPENED: TriggerPolicy.FULL,
        EventAction.LABELED: TriggerPolicy.SKIP_LABEL_GATED,
        EventAction.UNLABELED: TriggerPolicy.SKIP_LABEL_GATED,
    },
}


def handle_pull_request_event(
    tracker: IssueTracker,
    event: PullRequestEvent,
    config: FormatCheckerConfiguration,
) -> None:
    _handle(tracker, event, config)


def handle_issue_event(
    tracker: IssueTracker,
    event: IssueEvent,
    config: FormatCheckerConfiguration,
) -> None:
    _handle(tracker, event, config)


def handle(tracker: IssueTracker, event: ItemEvent, config: FormatCheckerConfiguration) -> None:
    if isinstance(event, PullRequestEvent):
        handle_pull_request_event(tracker, event, config)
    elif isinstance(event, IssueEvent):
        handle_issue_event(tracker, event, config)
    else:
        raise TypeError(f"Unsupported event type: {type(event).__name__}")


def select_rules(event: ItemEvent, rules: Sequence[RequiredMatchRule]) -> List[RequiredMatchRule]:
    """Rules whose outcome the event's action can change."""
    policy = TRIGGER_POLICIES[event.kind].get(event.action)
    candidates = [rule for rule in rules if event.kind in rule.target_kinds]
    if policy is None:
        return []
    if policy is TriggerPolicy.FULL:
        return candidates
    if not event.label:
        return []
    return [rule for rule in candidates if rule.skip_label and rule.skip_label == event.label]


def evaluate_event(
    tracker: IssueTracker,
    event: ItemEvent,
    config: FormatCheckerConfiguration,
) -> tuple[CheckableItem, LabelDiff] | None:
    """Compute the label diff for ``event`` without mutating anything.

    Returns ``None`` when the event cannot affect any configured rule.
    """
    rules = config.rules_for(event.org, event.repo)
    if not rules:
        LOGGER.debug("No format checker rules configured for %s", event.full_name)
        return None

    selected = select_rules(event, rules)
    if not selected:
        LOGGER.debug(
            "Action %s on %s#%d triggers no rules", event.action.value, event.full_name, event.number
        )
        return None

    # Labels are read now rather than trusted from the payload; the diff is best effort.
    labels = tracker.list_labels(event.org, event.repo, event.number)
    item = build_item(event, labels)
    if any(needs_commit_messages(rule, item) for rule in selected):
        messages = tracker.list_commit_messages(event.org, event.repo, event.number)
        item = replace(item, commit_messages=tuple(messages))

    validator = CrossReferenceValidator(tracker, event.org, event.repo)
    evaluations = []
    for rule in selected:
        result = evaluate_rule(rule, item, validator)
        if result.bypass is not None:
            LOGGER.debug(
                "Rule %s bypassed on %s#%d (%s)",
                rule.missing_label,
                item.full_name,
                item.number,
                result.bypass.value,
            )
        elif result.violated_captures:
            LOGGER.info(
                "Invalid issue references %s on %s#%d for %s",
                ", ".join(result.violated_captures),
                item.full_name,
                item.number,
                rule.missing_label,
            )
        evaluations.append((rule, result))

    return item, reconcile(evaluations, item.labels)


def apply_diff(tracker: IssueTracker, item: CheckableItem, diff: LabelDiff) -> None:
    for label in diff.remove:
        LOGGER.info("Removing label %s from %s#%d", label, item.full_name, item.number)
        tracker.remove_label(item.org, item.repo, item.number, label)
    for label in diff.add:
        LOGGER.info("Adding label %s to %s#%d", label, item.full_name, item.number)
        tracker.add_label(item.org, item.repo, item.number, label)
    if diff.comment:
        LOGGER.info("Commenting on %s#%d", item.full_name, item.number)
        tracker.create_comment(item.org, item.repo, item.number, diff.comment)


def build_item(event: ItemEvent, labels: Sequence[str]) -> CheckableItem:
    created_at = event.created_at
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return CheckableItem(
        kind=event.kind,
        org=event.org,
        repo=event.repo,
        number=event.number,
        title=event.title,
        body=event.body,
        author=event.author,
        created_at=created_at,
        labels=frozenset(labels),
        base_branch=getattr(event, "base_branch", None),
    )


def _handle(tracker: IssueTracker, event: ItemEvent, config: FormatCheckerConfiguration) -> None:
    evaluated = evaluate_event(tracker, event, config)
    if evaluated is None:
        return
    item, diff = evaluated
    if diff.is_empty():
        return
    apply_diff(tracker, item, diff)
