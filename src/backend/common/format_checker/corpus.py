from __future__ import annotations

from typing import List

from .config import RequiredMatchRule
from .models import CheckableItem, TargetKind


def extract_corpora(rule: RequiredMatchRule, item: CheckableItem) -> List[str]:
    """Texts to check for ``rule``: title, body, then each commit message on its own.

    Commit messages stay separate so that one good commit satisfies the rule
    and the pattern never matches across two messages. Empty texts are dropped.
    """
    corpora: List[str] = []
    if rule.title and item.title:
        corpora.append(item.title)
    if rule.body and item.body:
        corpora.append(item.body)
    if rule.commit_message and item.kind is TargetKind.PULL_REQUEST:
        corpora.extend(message for message in item.commit_messages if message)
    return corpora
