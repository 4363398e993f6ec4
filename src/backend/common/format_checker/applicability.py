from __future__ import annotations

from typing import Optional

from .config import RequiredMatchRule
from .models import Bypass, CheckableItem, TargetKind


def is_applicable(rule: RequiredMatchRule, item: CheckableItem) -> bool:
    """Whether ``rule`` governs ``item`` at all.

    Checks run in order and the first failing one wins:
    - the item kind must be one of the rule's targets;
    - items created strictly before ``start_time`` are exempt;
    - with a branch allow-list, items without a listed base branch are exempt.
    """
    if item.kind not in rule.target_kinds:
        return False

    if rule.start_time is not None and item.created_at < rule.start_time:
        return False

    if rule.branches:
        if item.kind is not TargetKind.PULL_REQUEST or not item.base_branch:
            return False
        if item.base_branch not in rule.branches:
            return False

    return True


def bypass_for(rule: RequiredMatchRule, item: CheckableItem) -> Optional[Bypass]:
    if rule.skip_label and item.has_label(rule.skip_label):
        return Bypass.SKIP_LABEL
    if item.author and item.author in rule.trusted_users:
        return Bypass.TRUSTED_USER
    return None
