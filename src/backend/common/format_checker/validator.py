from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from .errors import CrossReferenceLookupError
from .ports import IssueTracker

LOGGER = logging.getLogger(__name__)


class CrossReferenceValidator:
    """Checks that captured issue numbers point at real issues of one repository.

    A reference is valid only if the tracker knows the number and the entity is
    not a pull request (both share one numbering space). Answers are cached for
    the lifetime of the validator, which is one event.
    """

    def __init__(self, tracker: IssueTracker, org: str, repo: str) -> None:
        self._tracker = tracker
        self._org = org
        self._repo = repo
        self._known: Dict[int, bool] = {}

    def is_valid(self, reference: str) -> bool:
        if not (reference.isascii() and reference.isdigit()):
            return False
        number = int(reference)
        if number not in self._known:
            self._known[number] = self._lookup(number)
        return self._known[number]

    def invalid_references(self, references: Iterable[str]) -> List[str]:
        invalid: List[str] = []
        for reference in references:
            if not self.is_valid(reference) and reference not in invalid:
                invalid.append(reference)
        return invalid

    def _lookup(self, number: int) -> bool:
        try:
            issue = self._tracker.get_issue(self._org, self._repo, number)
        except Exception as exc:
            raise CrossReferenceLookupError(self._org, self._repo, number, exc) from exc

        if issue is None:
            LOGGER.debug("%s/%s#%d does not exist", self._org, self._repo, number)
            return False
        if issue.is_pull_request:
            LOGGER.debug("%s/%s#%d is a pull request, not an issue", self._org, self._repo, number)
            return False
        return True
