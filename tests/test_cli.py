"""
Tests for the scala-indent command line tool.
"""

import os
import tempfile

import pytest

from scalaindent.cli import scala_indent

UNINDENTED = "object A {\ndef f = {\n1\n}\n}\n"
INDENTED = "object A {\n  def f = {\n    1\n  }\n}\n"


def write_temp(content):
    with tempfile.NamedTemporaryFile(mode="w", suffix=".scala", delete=False) as f:
        f.write(content)
        return f.name


def read(path):
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


class TestCLI:
    """Test the scala-indent CLI tool."""

    def test_reindent_in_place(self, capsys):
        """Test that the input file is rewritten when no output is given."""
        scala_file = write_temp(UNINDENTED)
        try:
            scala_indent([scala_file])
            assert read(scala_file) == INDENTED
            assert "Saved reindented source" in capsys.readouterr().out
        finally:
            os.unlink(scala_file)

    def test_output_file(self):
        """Test writing the result to a separate file."""
        scala_file = write_temp(UNINDENTED)
        with tempfile.NamedTemporaryFile(suffix=".scala", delete=False) as f:
            output_file = f.name

        try:
            scala_indent([scala_file, output_file])
            assert read(output_file) == INDENTED
            assert read(scala_file) == UNINDENTED
        finally:
            os.unlink(scala_file)
            if os.path.exists(output_file):
                os.unlink(output_file)

    def test_stdout(self, capsys):
        scala_file = write_temp(UNINDENTED)
        try:
            scala_indent([scala_file, "--stdout"])
            assert capsys.readouterr().out == INDENTED
            assert read(scala_file) == UNINDENTED
        finally:
            os.unlink(scala_file)

    def test_step_option(self, capsys):
        scala_file = write_temp(UNINDENTED)
        try:
            scala_indent([scala_file, "--stdout", "--step", "4"])
            assert capsys.readouterr().out == (
                "object A {\n    def f = {\n        1\n    }\n}\n"
            )
        finally:
            os.unlink(scala_file)

    def test_strategy_option(self, capsys):
        scala_file = write_temp("foo()\nbar()")
        try:
            scala_indent([scala_file, "--stdout"])
            assert capsys.readouterr().out == "foo()\n  bar()"
            scala_indent([scala_file, "--stdout", "--strategy", "reluctant"])
            assert capsys.readouterr().out == "foo()\nbar()"
        finally:
            os.unlink(scala_file)

    def test_alignment_options(self, capsys):
        scala_file = write_temp("foo(1,\n2)")
        try:
            scala_indent([scala_file, "--stdout"])
            assert capsys.readouterr().out == "foo(1,\n    2)"
            scala_indent([scala_file, "--stdout", "--no-align-parameters"])
            assert capsys.readouterr().out == "foo(1,\n  2)"
        finally:
            os.unlink(scala_file)

    def test_no_align_forms(self, capsys):
        scala_file = write_temp("if (x) {\nfoo()\n}\nelse {\nbar()\n}")
        try:
            scala_indent([scala_file, "--stdout"])
            assert capsys.readouterr().out == "if (x) {\n  foo()\n}\nelse {\n  bar()\n}"
            scala_indent([scala_file, "--stdout", "--no-align-forms"])
            assert capsys.readouterr().out == (
                "if (x) {\n  foo()\n}\n  else {\n    bar()\n  }"
            )
        finally:
            os.unlink(scala_file)

    def test_invalid_step(self, capsys):
        scala_file = write_temp(UNINDENTED)
        try:
            with pytest.raises(SystemExit) as exc:
                scala_indent([scala_file, "--stdout", "--step", "0"])
            assert exc.value.code == 1
            assert "step must be a positive integer" in capsys.readouterr().out
            assert read(scala_file) == UNINDENTED
        finally:
            os.unlink(scala_file)

    def test_line_option(self, capsys):
        """Test printing the column of a single line."""
        unindented = write_temp(UNINDENTED)
        indented = write_temp(INDENTED)
        try:
            # measured from the def line as it currently stands
            scala_indent([unindented, "--line", "3"])
            assert capsys.readouterr().out.strip() == "2"
            assert read(unindented) == UNINDENTED

            scala_indent([indented, "--line", "3"])
            assert capsys.readouterr().out.strip() == "4"
        finally:
            os.unlink(unindented)
            os.unlink(indented)

    def test_line_out_of_range(self, capsys):
        scala_file = write_temp(UNINDENTED)
        try:
            with pytest.raises(SystemExit) as exc:
                scala_indent([scala_file, "--line", "42"])
            assert exc.value.code == 1
            assert "out of range" in capsys.readouterr().out
        finally:
            os.unlink(scala_file)

    def test_check(self, capsys):
        """Test that --check fails on unindented files and passes otherwise."""
        unindented = write_temp(UNINDENTED)
        indented = write_temp(INDENTED)
        try:
            with pytest.raises(SystemExit) as exc:
                scala_indent([unindented, "--check"])
            assert exc.value.code == 1
            assert "would be reindented" in capsys.readouterr().out
            assert read(unindented) == UNINDENTED

            scala_indent([indented, "--check"])
            assert "would be reindented" not in capsys.readouterr().out
        finally:
            os.unlink(unindented)
            os.unlink(indented)

    def test_missing_file(self, capsys):
        with pytest.raises(SystemExit) as exc:
            scala_indent(["nonexistent_file.scala"])
        assert exc.value.code == 1
        assert "not found" in capsys.readouterr().out
