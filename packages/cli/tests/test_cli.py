"""Tests for the CLI entry point."""

import io
import json

from click.testing import CliRunner

from commitlens_cli.cli import main
from commitlens_cli.commands.log import split_messages


def _invoke(args, input=None, config=None, tmp_path=None):
    """Run the CLI with an explicit config path so a stray .commitlens.yml is never read."""
    config_path = "nonexistent.yml"
    if config is not None:
        cfg = tmp_path / ".commitlens.yml"
        cfg.write_text(config)
        config_path = str(cfg)
    return CliRunner().invoke(main, ["--config", config_path, *args], input=input)


def _json_lines(output):
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


class TestParseCommand:
    def test_json_output(self):
        result = _invoke(["parse"], input="feat(core): add x\n\nCloses #12\n")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["type"] == "feat"
        assert data["scope"] == "core"
        assert data["subject"] == "add x"
        assert data["references"][0]["issue"] == "12"

    def test_table_output(self):
        result = _invoke(["parse", "--format", "table"], input="fix(api): handle nulls\n\ncc @alice\n")
        assert result.exit_code == 0, result.output
        assert "handle nulls" in result.output
        assert "@alice" in result.output

    def test_table_output_keeps_bracketed_text(self):
        result = _invoke(["parse", "--format", "table"], input="fix: x\n\nsee docs[/guide] and [red] tag\n")
        assert result.exit_code == 0, result.output
        assert "docs[/guide]" in result.output
        assert "[red] tag" in result.output

    def test_reads_message_file(self, tmp_path):
        message = tmp_path / "COMMIT_EDITMSG"
        message.write_text("docs: update readme\n")
        result = _invoke(["parse", str(message)])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["type"] == "docs"

    def test_empty_message_is_an_error(self):
        result = _invoke(["parse"], input="  \n\n")
        assert result.exit_code != 0
        assert "empty" in result.output

    def test_config_comment_char(self, tmp_path):
        result = _invoke(["parse"], input="feat: x\n\n; dropped\nkept\n", config="comment_char: ';'\n", tmp_path=tmp_path)
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["body"] == "kept"

    def test_bad_comment_char(self, tmp_path):
        result = _invoke(["parse"], input="feat: x\n", config="comment_char: '##'\n", tmp_path=tmp_path)
        assert result.exit_code != 0
        assert "single character" in result.output

    def test_bad_header_pattern(self, tmp_path):
        result = _invoke(["parse"], input="feat: x\n", config="header_pattern: '(unclosed'\n", tmp_path=tmp_path)
        assert result.exit_code != 0
        assert "header_pattern" in result.output


class TestLogCommand:
    def test_nul_separated_messages(self):
        result = _invoke(["log"], input="feat: a\0fix(core): b\n\nBody\0")
        assert result.exit_code == 0, result.output
        records = _json_lines(result.output)
        assert [r["type"] for r in records] == ["feat", "fix"]
        assert records[1]["body"] == "Body"

    def test_custom_separator(self):
        result = _invoke(["log", "--separator", "==="], input="feat: a===fix: b")
        assert result.exit_code == 0, result.output
        assert [r["type"] for r in _json_lines(result.output)] == ["feat", "fix"]

    def test_empty_separator_rejected(self):
        result = _invoke(["log", "--separator", ""], input="feat: a")
        assert result.exit_code == 2
        assert "must not be empty" in result.output

    def test_strict_mode_stops_on_empty_message(self):
        result = _invoke(["log"], input="feat: a\0\0fix: b")
        assert result.exit_code != 0
        assert "--lenient" in result.output
        assert [r["type"] for r in _json_lines(result.output)] == ["feat"]

    def test_lenient_mode_emits_placeholder(self):
        result = _invoke(["log", "--lenient"], input="feat: a\0\0fix: b")
        assert result.exit_code == 0, result.output
        records = _json_lines(result.output)
        assert len(records) == 3
        assert records[1]["header"] is None
        assert "placeholder" in result.output

    def test_high_water_mark_from_config(self, mocker, tmp_path):
        mock_parse = mocker.patch("commitlens_cli.commands.log.parse_commits", return_value=iter([]))
        result = _invoke(["log"], input="feat: a", config="high_water_mark: 5\n", tmp_path=tmp_path)
        assert result.exit_code == 0, result.output
        assert mock_parse.call_args.kwargs["high_water_mark"] == 5
        assert mock_parse.call_args.kwargs["warn"] is None

    def test_invalid_high_water_mark(self, tmp_path):
        result = _invoke(["log"], input="feat: a", config="high_water_mark: 0\n", tmp_path=tmp_path)
        assert result.exit_code != 0
        assert "high_water_mark" in result.output


class TestSplitMessages:
    def test_trailing_separator_does_not_add_message(self):
        assert list(split_messages(io.StringIO("a\0b\0"), "\0")) == ["a", "b"]

    def test_keeps_empty_messages_between_separators(self):
        assert list(split_messages(io.StringIO("a\0\0b"), "\0")) == ["a", "", "b"]

    def test_separator_spanning_chunks(self, monkeypatch):
        monkeypatch.setattr("commitlens_cli.commands.log._READ_SIZE", 3)
        assert list(split_messages(io.StringIO("first==second==third"), "==")) == ["first", "second", "third"]
