"""AppContext — settings plus result emission for the CLI.

Created once by the root command. Centralizes stdout/stderr routing and
exit codes so the command body stays a thin call into GridService.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pipecalc.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from pipecalc.config.settings import PipecalcSettings
    from pipecalc.services.result import ServiceResult


class AppContext:
    """Shared state for one CLI invocation."""

    def __init__(self, settings: PipecalcSettings, *, source: str | None = None) -> None:
        self.settings = settings

        from pipecalc.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json, source=source)

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            verbose=self.settings.verbose,
            pretty=self.settings.render.pretty,
            pad=self.settings.render.pad,
        )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): grid to stdout, returns normally.
          Warnings, the debug dump, and timings go to stderr so they
          never pollute piped output.
        * Failure: diagnostic to stderr, nothing on stdout, exit code 1.
        """
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if not result.ok:
            click.echo(output, err=True)
            raise SystemExit(1)

        # In JSON mode these are already in the serialized payload.
        if not settings.json_output:
            self._emit_diagnostics(result)
        click.echo(output)

    def _emit_diagnostics(self, result: ServiceResult) -> None:
        from pipecalc.output.renderers import render_debug_grid, render_timings

        intermediate = result.data.get("intermediate")
        if self.settings.debug and intermediate is not None:
            click.echo(render_debug_grid(intermediate), err=True)
            click.echo("-" * 80, err=True)
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)
        if self.settings.verbose:
            timings = render_timings(result)
            if timings:
                click.echo(timings, err=True)
