"""Root CLI command for pipecalc: evaluate one grid file."""

from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError

from pipecalc import __version__
from pipecalc.commands._base import PipecalcCommand
from pipecalc.commands._context import AppContext
from pipecalc.config.settings import PipecalcSettings


def _describe_validation_error(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )


@click.command(
    cls=PipecalcCommand,
    examples="""\
  pipecalc sheet.txt
  pipecalc --pp sheet.txt
  pipecalc --pp --pad sheet.txt
  pipecalc --format %.3f sheet.txt
  pipecalc --debug sheet.txt
  pipecalc --json sheet.txt
  pipecalc -c ./pipecalc.toml sheet.txt""",
)
@click.version_option(version=__version__, prog_name="pipecalc")
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--debug", is_flag=True, help="Dump the grid after clone resolution to stderr.")
@click.option("--pp", "--pretty", "pretty", is_flag=True, help="Spaces around the delimiter.")
@click.option("--pad", is_flag=True, help="Pad columns to a uniform width.")
@click.option(
    "--format",
    "number_format",
    default=None,
    metavar="FMT",
    help="printf-like number format (default: %.2f).",
)
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and stage timings.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    file: Path,
    debug: bool,
    pretty: bool,
    pad: bool,
    number_format: str | None,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """Evaluate the pipe-delimited grid in FILE and print the result.

    Cells holding =formulas are computed, and :^ :> :v :< clones copy
    the neighbouring cell the arrow points at, shifting its references.
    """
    try:
        settings = PipecalcSettings.from_cli(
            config_path=config_path,
            start=file.parent,
            number_format=number_format,
            pretty=pretty,
            pad=pad,
            json_output=json_output,
            verbose=verbose,
            log_json=log_json,
            debug=debug,
        )
    except ValidationError as exc:
        msg = f"Invalid configuration: {_describe_validation_error(exc)}"
        raise click.ClickException(msg) from exc

    app = AppContext(settings, source=str(file))
    ctx.obj = app

    from pipecalc.services.evaluate import GridService

    app.emit(GridService(settings).evaluate_file(file))
