"""structlog setup for hosts and scripts embedding the engine.

The library modules only call `get_logger`; nothing is configured on import.
A host that wants readable or JSON output calls `setup_logging` once.
"""

from __future__ import annotations

import logging
import os
import sys

import structlog

LEVEL_ENV = "BEHAVIOR_ENGINE_LOG_LEVEL"
FORMAT_ENV = "BEHAVIOR_ENGINE_LOG_FORMAT"


def _renderer(json_output: bool) -> structlog.types.Processor:
    if json_output:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def setup_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Send engine events to stderr through stdlib logging."""

    level = level or os.environ.get(LEVEL_ENV, "INFO")
    if json_output is None:
        json_output = os.environ.get(FORMAT_ENV, "").lower() == "json"

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, _renderer(json_output)],
        )
    )

    engine_logger = logging.getLogger("behavior_engine")
    engine_logger.handlers[:] = [handler]
    engine_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    engine_logger.propagate = False


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
