"""Structured logging with structlog.

structlog renders each event, stdlib logging delivers it. Production gets
one JSON object per line; everything else the console renderer.

Usage:
    import structlog
    logger = structlog.get_logger()
    logger.info("statement_parsed", bank="HDFC", count=42)
"""

import logging
import sys
from typing import IO, Optional

import structlog

from .config import Settings, get_settings

_SHARED_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]

# Handler installed by the last setup_logging() call, replaced on reconfiguration
_handler: Optional[logging.Handler] = None


def setup_logging(log_level: str = "INFO", json_output: bool = True, stream: Optional[IO[str]] = None) -> None:
    """Configure structured logging for the engine.

    Args:
        log_level: Python log level string (DEBUG, INFO, WARNING, ERROR).
        json_output: JSON lines when True, colorized console output otherwise.
        stream: Destination for log lines; defaults to stderr so stdout
                stays clean for CLI output.
    """
    global _handler

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[*_SHARED_PROCESSORS, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
    _handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    _handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(_handler)
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure logging from LOG_LEVEL / ENVIRONMENT."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, json_output=settings.json_logs)
