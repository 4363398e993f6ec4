import pytest

from common.format_checker.errors import RuleConfigError
from common.format_checker.patterns import compile_pattern, match_corpus, render_pattern
from format_checker_support import REGEXES


def test_plain_pattern_is_not_rendered():
    assert render_pattern(r"^\d{2,4}$", org="org", repo="repo") == r"^\d{2,4}$"


def test_template_binds_and_escapes_repository_identity():
    rendered = render_pattern(r"{{ org }}/{{ repo }}#(\d+)", org="acme", repo="site.io")
    assert rendered == r"acme/site\.io#(\d+)"


def test_unknown_template_variable_is_a_config_error():
    with pytest.raises(RuleConfigError):
        render_pattern(r"{{ owner }}#\d+", org="org", repo="repo")


def test_malformed_regexp_is_a_config_error():
    with pytest.raises(RuleConfigError):
        compile_pattern(r"(unclosed", "org", "repo")


def test_compiled_patterns_are_cached_per_repository():
    first = compile_pattern(REGEXES.issue_number_line, "org", "repo")
    assert compile_pattern(REGEXES.issue_number_line, "org", "repo") is first
    assert compile_pattern(REGEXES.issue_number_line, "org2", "repo2") is not first


def test_repeated_group_reports_every_capture():
    pattern = compile_pattern(REGEXES.issue_title, "org", "repo")
    outcome = match_corpus(pattern, "[TI-12345][TI-1234] pkg: what's changed")
    assert outcome.matched
    assert outcome.captures == ("12345", "1234")


def test_captures_are_collected_across_matches():
    pattern = compile_pattern(REGEXES.issue_number_line, "org", "repo")
    body = "Issue Number: close #1, ref org/repo#2\nsome text\nissue number: fixes #3\n"
    outcome = match_corpus(pattern, body)
    assert outcome.captures == ("1", "2", "3")


def test_pattern_without_issue_group_reports_no_captures():
    pattern = compile_pattern(REGEXES.issue_number, "org", "repo")
    outcome = match_corpus(pattern, "close #12345")
    assert outcome.matched
    assert outcome.captures == ()


def test_empty_corpus_never_matches():
    pattern = compile_pattern(r".*", "org", "repo")
    assert not match_corpus(pattern, "").matched


def test_matching_is_case_sensitive_unless_pattern_says_otherwise():
    sensitive = compile_pattern(r"^Issue Number:", "org", "repo")
    assert not match_corpus(sensitive, "issue number: #1").matched

    insensitive = compile_pattern(REGEXES.issue_number_line, "org", "repo")
    assert match_corpus(insensitive, "ISSUE NUMBER: Close #1").matched


def test_cross_repository_reference_does_not_match_scoped_template():
    pattern = compile_pattern(REGEXES.issue_number_line, "org", "repo")
    assert not match_corpus(pattern, "Issue Number: close org2/repo2#12345").matched
    assert match_corpus(pattern, "Issue Number: close org/repo#12345").captures == ("12345",)


GO_ISSUE_NUMBER_PREFIX = r"((https|http)://github\.com/{{.Org}}/{{.Repo}}/issues/|{{.Org}}/{{.Repo}}#|#)"


def test_go_template_placeholders_are_bound_to_repository():
    pattern = compile_pattern(
        r"(?im)^Issue Number:\s*close " + GO_ISSUE_NUMBER_PREFIX + r"(?P<issue_number>[1-9]\d*)",
        "org",
        "repo",
    )
    assert match_corpus(pattern, "Issue Number: close https://github.com/org/repo/issues/12345").captures == (
        "12345",
    )
    assert match_corpus(pattern, "Issue Number: close org/repo#12346").captures == ("12346",)
    assert not match_corpus(pattern, "Issue Number: close org2/repo2#12345").matched


def test_go_placeholders_accept_inner_spaces():
    assert render_pattern(r"{{ .Org }}/{{.Repo }}#\d+", org="acme", repo="site") == r"acme/site#\d+"


def test_literal_comment_opener_survives_rendering():
    assert render_pattern(r"\{#{{ org }}\}", org="acme", repo="site") == r"\{#acme\}"


def test_digit_classes_only_match_ascii():
    pattern = compile_pattern(REGEXES.issue_title, "org", "repo")
    assert not match_corpus(pattern, "[TI-1٢٣] pkg: what's changed").matched
