"""Structured logging configuration.

Library events go through the standard ``logging`` module under the
``tezrpc`` logger, which carries only a ``NullHandler`` until the
application opts in with ``configure_logging`` or its own handlers.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

import structlog

LOGGER_NAME = "tezrpc"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


class _TezrpcHandler(logging.StreamHandler):
    """Marks the handler installed by ``configure_logging``."""


def configure_logging(
    level: int = logging.INFO,
    output: Optional[TextIO] = None,
    json_format: bool = True,
) -> None:
    """Send library log events to a stream, rendered by structlog.

    Calling it again replaces the previous handler.

    Args:
        level: Logging level (default: INFO).
        output: Output stream (default: stderr).
        json_format: Render JSON lines instead of the console format.
    """
    output = output or sys.stderr

    renderer: structlog.types.Processor
    if json_format:
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=output.isatty())

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
        ],
    )

    handler = _TezrpcHandler(output)
    handler.setFormatter(formatter)

    library_logger = logging.getLogger(LOGGER_NAME)
    for existing in list(library_logger.handlers):
        if isinstance(existing, _TezrpcHandler):
            library_logger.removeHandler(existing)
    library_logger.addHandler(handler)
    library_logger.setLevel(level)
    library_logger.propagate = False


def get_logger(name: str = LOGGER_NAME) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to a stdlib logger under ``tezrpc``.

    Independent of the global structlog configuration, so the host
    application's setup is never touched.
    """
    logger: structlog.stdlib.BoundLogger = structlog.wrap_logger(
        logging.getLogger(name),
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )
    return logger
