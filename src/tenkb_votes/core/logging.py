"""
Structured logging setup.

Every module logs through ``structlog.get_logger(__name__)``; this module
only decides the level filter and the renderer.
"""

import logging

import structlog

from tenkb_votes.core.config import Settings


def configure_logging(settings: Settings) -> None:
    """Configure structlog for the embedding process."""
    level = logging.getLevelName(settings.LOG_LEVEL)

    if settings.LOG_JSON:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )
    structlog.contextvars.bind_contextvars(app=settings.APP_NAME)


def short_id(voter_id: str | None) -> str | None:
    """Truncate a voter id for log output."""
    if not voter_id:
        return None
    return voter_id[:8]
