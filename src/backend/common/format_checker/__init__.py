"""Format checker: rule evaluation and label reconciliation for pull requests and issues.

This package intentionally contains only domain logic:
- Inputs are normalized events, the configured rules and an ``IssueTracker`` port.
- No HTTP, webhook or GitHub payload handling lives here.
"""

from .agent import ConfigAgent
from .config import (
    FormatCheckerConfiguration,
    FormatCheckerEntry,
    RequiredMatchRule,
    load_configuration,
    parse_configuration,
)
from .dispatcher import handle, handle_issue_event, handle_pull_request_event
from .errors import CrossReferenceLookupError, FormatCheckerError, RuleConfigError
from .help import PluginHelp, help_provider
from .models import (
    CheckableItem,
    EvaluationResult,
    EventAction,
    IssueEvent,
    LabelDiff,
    PullRequestEvent,
    TargetKind,
    TrackerIssue,
)
from .ports import IssueTracker
