"""structlog setup.

Every module grabs `structlog.get_logger()`; this wires the processors
once at startup so request-bound context (request_id) shows up on each
line.
"""

import logging

import structlog

from sealnote.config import Settings

_configured = False


def configure_logging(settings: Settings) -> None:
    """Initialize structlog and stdlib logging. Idempotent."""
    global _configured
    if _configured:
        return

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
    ]
    if settings.log_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.processors.KeyValueRenderer(key_order=["event", "request_id"])
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(level=level)

    # aiosqlite logs every cursor operation at DEBUG
    logging.getLogger("aiosqlite").setLevel(logging.INFO)

    _configured = True
