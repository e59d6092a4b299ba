"""Tests for the conventional-commit view."""

from commitlens_core.commit import (
    GIT_LOG_FORMAT_FOR_PARSING,
    CommitFromGitLog,
    commit_fields_as_format,
    parse_commit_from_git_log,
    parse_commit_message,
)


def test_git_log_format():
    assert GIT_LOG_FORMAT_FOR_PARSING == "%B%n-hash-%n%H%n-shortHash-%n%h%n-author-%n%aN"
    assert commit_fields_as_format({"a": "%x"}) == "%n-a-%n%x"


def test_parses_header_fields():
    commit = parse_commit_message("feat(core): add the thing\n\nSome body text.")
    assert commit.type == "feat"
    assert commit.scope == "core"
    assert commit.subject == "add the thing"
    assert commit.body == "Some body text."
    assert commit.footer == ""
    assert not commit.is_fixup


def test_missing_values_are_empty_strings():
    commit = parse_commit_message("not conventional at all")
    assert commit.type == ""
    assert commit.scope == ""
    assert commit.subject == ""
    assert commit.header == "not conventional at all"


def test_fixup_prefix():
    commit = parse_commit_message("fixup! feat(core): add the thing")
    assert commit.is_fixup
    assert commit.type == "feat"
    assert commit.full_text == "fixup! feat(core): add the thing"


def test_squash_and_revert_prefixes():
    assert parse_commit_message("squash! fix: typo").is_squash
    revert = parse_commit_message("revert: fix: typo")
    assert revert.is_revert
    assert revert.type == "fix"
    assert revert.subject == "typo"


def test_breaking_changes_and_deprecations():
    commit = parse_commit_message(
        "feat(api): remove v1\n\nBREAKING CHANGE: the v1 endpoints are gone\nDEPRECATED: the old client\n"
    )
    assert [n.text for n in commit.breaking_changes] == ["the v1 endpoints are gone"]
    assert [n.text for n in commit.deprecations] == ["the old client"]
    assert commit.body == ""


def test_comment_lines_are_ignored():
    commit = parse_commit_message("fix: typo\n\n# Please enter the commit message\nActual body")
    assert commit.body == "Actual body"


def test_references():
    commit = parse_commit_message("fix: crash\n\nCloses #12")
    assert [r.issue for r in commit.references] == ["12"]


def test_parse_from_git_log():
    raw = b"fix(cli): handle empty input\n\nBody.\n\n-hash-\nabc123def\n-shortHash-\nabc123d\n-author-\nJane Doe"
    commit = parse_commit_from_git_log(raw)
    assert isinstance(commit, CommitFromGitLog)
    assert commit.hash == "abc123def"
    assert commit.short_hash == "abc123d"
    assert commit.author == "Jane Doe"
    assert commit.type == "fix"
    assert commit.body == "Body."
