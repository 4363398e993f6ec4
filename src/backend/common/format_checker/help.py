from __future__ import annotations

import argparse
import json
from typing import Any, Dict, Iterable, List

import yaml
from pydantic import BaseModel, Field

from .config import FormatCheckerConfiguration, RequiredMatchRule, load_configuration

PLUGIN_DESCRIPTION = (
    "The format-checker plugin checks the title, body and commit messages of pull requests "
    "and issues against the configured rules and labels the items that do not comply."
)


class PluginHelp(BaseModel):
    description: str = PLUGIN_DESCRIPTION
    # Per-repository ("org/repo") description of the configured rules.
    config: Dict[str, str] = Field(default_factory=dict)


def describe_rule(rule: RequiredMatchRule) -> str:
    targets = _join_words(
        [name for name, enabled in (("pull requests", rule.pull_request), ("issues", rule.issue)) if enabled]
    )
    corpora = _join_words(
        [
            name
            for name, enabled in (
                ("title", rule.title),
                ("body", rule.body),
                ("commit messages", rule.commit_message),
            )
            if enabled
        ],
        conjunction="or",
    )
    lines = [
        f"The {corpora} of {targets} must be matched by regex `{rule.regexp}`, "
        f"otherwise the label `{rule.missing_label}` is added."
    ]
    if rule.branches:
        lines.append(f"Only pull requests targeting {', '.join(f'`{b}`' for b in rule.branches)} are checked.")
    if rule.start_time is not None:
        lines.append(f"Items created before {rule.start_time.isoformat()} are not checked.")
    if rule.skip_label:
        lines.append(f"Adding the label `{rule.skip_label}` skips this check.")
    if rule.trusted_users:
        lines.append(f"Items authored by {', '.join(rule.trusted_users)} always pass.")
    return " ".join(lines)


def describe_repo(config: FormatCheckerConfiguration, full_name: str) -> str:
    org, _, repo = full_name.partition("/")
    rules = config.rules_for(org, repo)
    return "\n".join(f"- {describe_rule(rule)}" for rule in rules)


def help_provider(config: FormatCheckerConfiguration, enabled_repos: Iterable[str]) -> PluginHelp:
    out = PluginHelp()
    for full_name in enabled_repos:
        text = describe_repo(config, full_name)
        if text:
            out.config[full_name] = text
    return out


def _join_words(words: List[str], *, conjunction: str = "and") -> str:
    if len(words) <= 1:
        return "".join(words)
    return f"{', '.join(words[:-1])} {conjunction} {words[-1]}"


def _configured_repos(config: FormatCheckerConfiguration) -> List[str]:
    names: List[str] = []
    for entry in config.format_checker:
        for name in entry.repos:
            if "/" in name and name not in names:
                names.append(name)
    return names


def _dump(plugin_help: PluginHelp, fmt: str) -> str:
    data: Dict[str, Any] = plugin_help.model_dump()
    if fmt == "json":
        return json.dumps(data, indent=2, sort_keys=True)
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=True)
    lines = [plugin_help.description]
    for full_name, text in plugin_help.config.items():
        lines.extend(["", f"## {full_name}", text])
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Describe the format checker rules configured per repository.")
    parser.add_argument("--config", required=True, help="Path to the YAML/JSON configuration file.")
    parser.add_argument(
        "--repo",
        action="append",
        default=None,
        help="Repository (org/repo) to describe; repeatable. Defaults to every configured repository.",
    )
    parser.add_argument(
        "--format",
        choices=("text", "yaml", "json"),
        default="text",
        help="Output format (default: text).",
    )
    args = parser.parse_args(argv)

    config = load_configuration(args.config)
    repos = args.repo or _configured_repos(config)
    print(_dump(help_provider(config, repos), args.format))


if __name__ == "__main__":
    main()
