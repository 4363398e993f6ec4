from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from .config import RequiredMatchRule
from .models import EvaluationResult, LabelDiff

NOTIFICATION_HEADER = "[FORMAT CHECKER NOTIFICATION]"


def reconcile(
    evaluations: Sequence[Tuple[RequiredMatchRule, EvaluationResult]],
    current_labels: Iterable[str],
) -> LabelDiff:
    """Turn per-rule results into the label changes and comment for one item.

    - inapplicable rules contribute nothing;
    - an unsatisfied rule adds its label unless the label is already there, and
      only that transition queues the rule's message;
    - a satisfied rule removes its label if present, silently.
    """
    labels = set(current_labels)
    diff = LabelDiff()
    notices: List[Tuple[str, str]] = []
    unsatisfied: set[str] = set()

    for rule, result in evaluations:
        if not result.applicable:
            continue
        label = rule.missing_label
        if result.satisfied:
            if label in labels and label not in diff.remove:
                diff.remove.append(label)
            continue
        unsatisfied.add(label)
        if label in labels or label in diff.add:
            continue
        diff.add.append(label)
        if rule.missing_message.strip():
            notices.append((label, rule.missing_message.strip()))

    # A label shared by several rules stays while any of them is unsatisfied.
    diff.remove = [label for label in diff.remove if label not in unsatisfied]
    diff.comment = render_notification(notices)
    return diff


def render_notification(notices: Sequence[Tuple[str, str]]) -> Optional[str]:
    if not notices:
        return None
    sections = [NOTIFICATION_HEADER]
    for label, message in notices:
        sections.append(f"Notice: To remove the `{label}` label, {_lower_first(message)}")
    sections.append("The label is removed automatically once the check passes.")
    return "\n\n".join(sections)


def _lower_first(message: str) -> str:
    if message[:1].isupper() and message[1:2].islower():
        return message[0].lower() + message[1:]
    return message
