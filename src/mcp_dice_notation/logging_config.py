# logging_config.py

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from mcp_dice_notation.config import Settings


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """structlog logger on top of a stdlib logger.

    Until ``setup_logging`` runs, stdlib levels and handlers decide what is
    emitted, so library use never writes debug events to stdout.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def setup_logging(settings: Settings | None = None) -> None:
    """Initialize structlog + stdlib logging.

    Logs always go to stderr: stdout carries CLI output and the MCP stdio
    transport.
    """
    level_name = (settings.log_level if settings else "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    use_json = bool(settings and settings.log_json)

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    processor_formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(processor_formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
