from __future__ import annotations

from typing import List

from .applicability import bypass_for, is_applicable
from .config import RequiredMatchRule
from .corpus import extract_corpora
from .models import CheckableItem, EvaluationResult, TargetKind
from .patterns import compile_pattern, match_corpus
from .validator import CrossReferenceValidator


def needs_commit_messages(rule: RequiredMatchRule, item: CheckableItem) -> bool:
    """Whether evaluating ``rule`` will actually read the pull request's commits."""
    return (
        rule.commit_message
        and item.kind is TargetKind.PULL_REQUEST
        and is_applicable(rule, item)
        and bypass_for(rule, item) is None
    )


def evaluate_rule(
    rule: RequiredMatchRule,
    item: CheckableItem,
    validator: CrossReferenceValidator,
) -> EvaluationResult:
    if not is_applicable(rule, item):
        return EvaluationResult.not_applicable()

    # Bypassed rules are never matched, so no tracker lookups are spent on them.
    bypass = bypass_for(rule, item)
    if bypass is not None:
        return EvaluationResult.bypassed(bypass)

    pattern = compile_pattern(rule.regexp, item.org, item.repo)
    violated: List[str] = []
    for corpus in extract_corpora(rule, item):
        outcome = match_corpus(pattern, corpus)
        if not outcome.matched:
            continue
        invalid = validator.invalid_references(outcome.captures)
        if not invalid:
            return EvaluationResult(applicable=True, satisfied=True)
        violated.extend(ref for ref in invalid if ref not in violated)

    return EvaluationResult(applicable=True, satisfied=False, violated_captures=violated)
