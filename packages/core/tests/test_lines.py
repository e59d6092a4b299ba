"""Tests for the line pipeline."""

from commitlens_core.lines import prepare_lines, split_lines, trim_newlines, truncate_to_scissor
from commitlens_core.options import SCISSOR


class TestTrimNewlines:
    def test_strips_only_line_breaks(self):
        assert trim_newlines("\r\n\n  indented\n\nend \n\r\n") == "  indented\n\nend "

    def test_all_newlines(self):
        assert trim_newlines("\n\r\n") == ""


class TestSplitLines:
    def test_mixed_line_endings(self):
        assert split_lines("a\r\nb\nc\rd") == ["a", "b", "c", "d"]


class TestTruncateToScissor:
    def test_cut_at_scissor(self):
        assert truncate_to_scissor(["a", SCISSOR, "b"], SCISSOR) == ["a"]

    def test_scissor_must_match_exactly(self):
        lines = ["a", " " + SCISSOR, "b"]
        assert truncate_to_scissor(lines, SCISSOR) == lines

    def test_no_scissor_configured(self):
        assert truncate_to_scissor(["a", SCISSOR], None) == ["a", SCISSOR]


class TestPrepareLines:
    def test_full_pipeline(self):
        raw = "\n\nheader\n\n# comment\ngpg: sig\nbody\n" + SCISSOR + "\nafter\n"
        assert prepare_lines(raw, comment_char="#", scissor=SCISSOR) == ["header", "", "body"]

    def test_comment_filter_only_checks_first_character(self):
        assert prepare_lines("a\n  # kept", comment_char="#") == ["a", "  # kept"]

    def test_gpg_filter_without_comment_char(self):
        assert prepare_lines("a\n   gpg: Good signature\nb") == ["a", "b"]
