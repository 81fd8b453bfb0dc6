"""structlog configuration for pipecalc.

stdout carries nothing but the rendered grid, so every log line goes to
stderr. The grid file being evaluated is bound as ``source`` for the
whole run, and stdlib records from pipecalc modules pick it up too.

Two output modes:
- Human (default): console-rendered lines, colored on a TTY
- JSON (--log-json): one JSON object per line
"""

from __future__ import annotations

import logging
import sys

import structlog

PACKAGE_LOGGER = "pipecalc"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    source: str | None = None,
) -> None:
    """Route structlog and stdlib logging to stderr.

    Args:
        verbose: Let pipecalc's own DEBUG events (stage counts, failures)
            through. Otherwise only WARNING and above.
        log_json: Use the JSON renderer instead of the console renderer.
        source: Grid file for this run, bound to every log line.
    """
    structlog.contextvars.clear_contextvars()
    if source is not None:
        structlog.contextvars.bind_contextvars(source=source)

    shared = _shared_processors()
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if log_json
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    # Third-party loggers stay at WARNING on the root.
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
