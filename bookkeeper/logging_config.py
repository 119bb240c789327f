"""
Structured logging setup.

Records are fetched and written through a remote spreadsheet, and every
failure there degrades to local data instead of raising. The log is the
only place those degradations become visible, so every module logs through
structlog with snake_case event names and keyword context.

Entry points call configure_logging() once; library modules only call
structlog.get_logger(__name__).
"""

import logging
import sys

import structlog


_configured = False


def configure_logging(debug: bool = False, json_logs: bool = True) -> None:
    """
    Configure structlog on top of the standard library logger.

    Args:
        debug: Log at DEBUG instead of INFO
        json_logs: Render JSON lines (False gives a console renderer)
    """
    global _configured
    if _configured:
        return

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str):
    """Get a structlog logger bound to a module name."""
    return structlog.get_logger(name)
