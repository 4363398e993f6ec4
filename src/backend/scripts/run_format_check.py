from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


def configure_logging(level: str | None = None) -> None:
    level_name = (level or os.getenv("FORMAT_CHECKER_LOG_LEVEL", "INFO")).strip().upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _split_repo(full_name: str) -> tuple[str, str]:
    org, sep, repo = full_name.partition("/")
    if not sep or not org or not repo or "/" in repo:
        raise SystemExit(f"--repo must look like org/repo, got {full_name!r}.")
    return org, repo


def run_format_check(*, config_path: str, full_name: str, number: int, issue: bool, apply: bool):
    """Evaluate one live pull request or issue and optionally apply the label diff."""
    _ensure_backend_on_path()
    from adapters.github.events import issue_event_from_api, pull_request_event_from_api
    from common.format_checker.config import load_configuration
    from common.format_checker.dispatcher import apply_diff, evaluate_event
    from connectors.github import GitHubIssueTracker, get_github_config

    org, repo = _split_repo(full_name)
    config = load_configuration(config_path)
    tracker = GitHubIssueTracker(get_github_config())

    if issue:
        event = issue_event_from_api(org, repo, tracker.fetch_issue(org, repo, number))
    else:
        event = pull_request_event_from_api(org, repo, tracker.fetch_pull_request(org, repo, number))

    evaluated = evaluate_event(tracker, event, config)
    if evaluated is None:
        return None
    item, diff = evaluated
    if apply and not diff.is_empty():
        apply_diff(tracker, item, diff)
    return diff


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Run the format checker against one pull request or issue and print the label diff."
    )
    parser.add_argument(
        "--config",
        default=os.getenv("FORMAT_CHECKER_CONFIG"),
        help="Path to the YAML/JSON rules file (defaults to $FORMAT_CHECKER_CONFIG).",
    )
    parser.add_argument("--repo", required=True, help="Repository as org/repo.")
    parser.add_argument("--number", required=True, type=int, help="Pull request or issue number.")
    parser.add_argument(
        "--issue",
        action="store_true",
        help="Treat --number as an issue instead of a pull request.",
    )
    parser.add_argument(
        "--apply",
        action="store_true",
        help="Apply the label changes and comment instead of only printing them.",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO).")
    args = parser.parse_args()

    if not args.config:
        raise SystemExit("--config or FORMAT_CHECKER_CONFIG is required.")
    configure_logging(args.log_level)

    diff = run_format_check(
        config_path=args.config,
        full_name=args.repo,
        number=args.number,
        issue=args.issue,
        apply=args.apply,
    )
    if diff is None:
        print("No format checker rules apply.")
        return 0

    print(json.dumps(diff.model_dump(mode="json"), indent=2))
    if diff.is_empty():
        print("Nothing to change.")
    elif not args.apply:
        print("Dry run: pass --apply to update the labels.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
