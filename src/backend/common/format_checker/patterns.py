"""Pattern building and matching.

Rule patterns may be Jinja2 templates over ``{{ org }}`` and ``{{ repo }}``.
They are rendered for the repository that owns the item being checked, so a
pattern such as ``{{ org }}/{{ repo }}#(?P<issue_number>\\d+)`` only accepts
same-repository references without any tracker round trip. The Go template
spellings ``{{.Org}}`` and ``{{.Repo}}`` found in existing rule files are
rewritten to those names before rendering.

Compilation uses the ``regex`` package rather than ``re`` because a repeated
group (``(\\[TI-(?P<issue_number>\\d+)\\])+``) must report every repetition,
which ``regex`` exposes through ``Match.captures``. Patterns compile with
``regex.ASCII``: ``\\d`` and ``\\w`` only match ASCII, as in existing rule files.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

import regex
from jinja2 import Environment, StrictUndefined, TemplateError

from .errors import RuleConfigError

ISSUE_NUMBER_GROUP = "issue_number"

_TEMPLATE_MARKERS = ("{{", "{%")
_GO_PLACEHOLDER = regex.compile(r"\{\{-?\s*\.(Org|Repo)\s*-?\}\}")
# Patterns never carry template comments; a literal "{#" is regex text.
_ENV = Environment(
    undefined=StrictUndefined,
    keep_trailing_newline=True,
    autoescape=False,
    comment_start_string="{#--",
    comment_end_string="--#}",
)


@dataclass(frozen=True)
class MatchOutcome:
    matched: bool
    captures: tuple[str, ...] = ()


def is_template(pattern: str) -> bool:
    return any(marker in pattern for marker in _TEMPLATE_MARKERS)


def render_pattern(pattern: str, *, org: str, repo: str) -> str:
    """Bind the repository identity into ``pattern``; plain patterns are returned unchanged."""
    if not is_template(pattern):
        return pattern
    pattern = _GO_PLACEHOLDER.sub(lambda m: "{{ " + m.group(1).lower() + " }}", pattern)
    try:
        return _ENV.from_string(pattern).render(org=regex.escape(org), repo=regex.escape(repo))
    except TemplateError as exc:
        raise RuleConfigError(f"Invalid pattern template {pattern!r}: {exc}") from exc


@lru_cache(maxsize=512)
def compile_pattern(pattern: str, org: str, repo: str) -> regex.Pattern:
    rendered = render_pattern(pattern, org=org, repo=repo)
    try:
        return regex.compile(rendered, regex.ASCII)
    except regex.error as exc:
        raise RuleConfigError(f"Invalid regexp {rendered!r}: {exc}") from exc


def match_corpus(pattern: regex.Pattern, corpus: str) -> MatchOutcome:
    """Match one corpus, collecting every ``issue_number`` capture of every match."""
    if not corpus:
        return MatchOutcome(matched=False)

    collect = ISSUE_NUMBER_GROUP in pattern.groupindex
    matched = False
    captures: list[str] = []
    for m in pattern.finditer(corpus):
        matched = True
        if collect:
            captures.extend(m.captures(ISSUE_NUMBER_GROUP))
    return MatchOutcome(matched=matched, captures=tuple(captures))
