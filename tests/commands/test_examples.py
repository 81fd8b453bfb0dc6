"""Tests for the --examples flag provided by PipecalcCommand."""

from __future__ import annotations

import click
from click.testing import CliRunner

from pipecalc.commands._base import PipecalcCommand


@click.command(cls=PipecalcCommand, examples="  demo run sheet.txt")
@click.argument("file")
def demo(file: str) -> None:
    click.echo(f"ran {file}")


class TestExamples:
    def test_prints_examples_without_file(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(demo, ["--examples"])
        assert result.exit_code == 0
        assert "Examples for 'demo':" in result.output
        assert "demo run sheet.txt" in result.output

    def test_listed_in_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(demo, ["--help"])
        assert "--examples" in result.output

    def test_normal_invocation(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(demo, ["x.txt"])
        assert result.output == "ran x.txt\n"

    def test_no_option_without_examples(self) -> None:
        command = PipecalcCommand("bare")
        assert all(param.name != "examples" for param in command.params)
