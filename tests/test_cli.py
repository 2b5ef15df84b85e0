"""Tests for the command-line front end."""
from __future__ import annotations

import logging

import pytest
from typer.testing import CliRunner

from pretty_erd.cli import app

runner = CliRunner()

DOCUMENT = "[Person]\n*id\n[Team]\n*id\nPerson *--1 Team\n"


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("pretty_erd")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


class TestCli:
    def test_reads_stdin_and_writes_stdout(self):
        result = runner.invoke(app, [], input=DOCUMENT)
        assert result.exit_code == 0
        assert result.stdout.startswith("graph {\n")
        assert '"Person" -- "Team"' in result.stdout

    def test_reads_and_writes_files(self, tmp_path):
        source = tmp_path / "schema.er"
        target = tmp_path / "schema.dot"
        source.write_text(DOCUMENT, encoding="utf-8")

        result = runner.invoke(app, ["-i", str(source), "-o", str(target)])
        assert result.exit_code == 0
        assert result.stdout == ""
        assert '"Team" [label=<' in target.read_text(encoding="utf-8")

    def test_long_option_names(self, tmp_path):
        source = tmp_path / "schema.er"
        source.write_text(DOCUMENT, encoding="utf-8")

        result = runner.invoke(app, ["--input", str(source)])
        assert result.exit_code == 0
        assert '"Person" [label=<' in result.stdout

    @pytest.mark.parametrize("flag", ["-h", "--help"])
    def test_help(self, flag):
        result = runner.invoke(app, [flag])
        assert result.exit_code == 0
        assert "--input" in result.output
        assert "--output" in result.output

    def test_rejects_positional_arguments(self):
        result = runner.invoke(app, ["schema.er"], input=DOCUMENT)
        assert result.exit_code == 2

    def test_rejects_unknown_options(self):
        result = runner.invoke(app, ["--format", "svg"], input=DOCUMENT)
        assert result.exit_code == 2

    def test_missing_input_file_is_a_usage_error(self, tmp_path):
        result = runner.invoke(app, ["-i", str(tmp_path / "missing.er")])
        assert result.exit_code == 2

    def test_syntax_error_exits_with_one(self):
        result = runner.invoke(app, [], input="[Person\n")
        assert result.exit_code == 1
        assert "error: line 1" in result.output

    def test_semantic_error_exits_with_one(self, tmp_path):
        target = tmp_path / "out.dot"
        result = runner.invoke(app, ["-o", str(target)], input="*orphan\n")
        assert result.exit_code == 1
        assert "without a preceding entity" in result.output
        assert not target.exists()

    def test_verbose_logs_to_stderr(self):
        result = runner.invoke(app, ["-v"], input=DOCUMENT)
        assert result.exit_code == 0
        assert "pretty_erd" in result.output

    def test_invalid_utf8_file_exits_with_one(self, tmp_path):
        source = tmp_path / "bad.er"
        source.write_bytes(b"[e\xff]\n")

        result = runner.invoke(app, ["-i", str(source)])
        assert result.exit_code == 1
        assert not isinstance(result.exception, UnicodeDecodeError)
        assert "error:" in result.output
        assert "utf-8" in result.output

    def test_invalid_utf8_stdin_exits_with_one(self):
        result = runner.invoke(app, [], input=b"[e\xff]\n")
        assert result.exit_code == 1
        assert "error:" in result.output

    def test_byte_order_mark_is_ignored_on_stdin(self):
        result = runner.invoke(app, [], input=b"\xef\xbb\xbf[e]\n")
        assert result.exit_code == 0
        assert '"e" [label=<' in result.stdout

    def test_byte_order_mark_is_ignored_in_files(self, tmp_path):
        source = tmp_path / "bom.er"
        source.write_bytes(b"\xef\xbb\xbf[e]\n")

        result = runner.invoke(app, ["-i", str(source)])
        assert result.exit_code == 0
        assert '"e" [label=<' in result.stdout
