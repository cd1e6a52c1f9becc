"""Logging configuration"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from stats_server.core.config import Settings

# Loggers owned by libraries: (name, level while we run)
_LIBRARY_LEVELS = (
    # stats_server.access already writes one line per request
    ("uvicorn.access", logging.WARNING),
    ("asyncpg", logging.WARNING),
)


def _build_handler(settings: Settings) -> RichHandler:
    # markup off: access lines contain "[request-id]", which rich would eat
    handler = RichHandler(
        console=Console(stderr=True, force_terminal=True, width=120),
        show_path=settings.is_development,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=settings.is_development,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%Y-%m-%d %H:%M:%S]"))
    return handler


def setup_logging(settings: Settings) -> None:
    """Send every log record through one Rich handler on stderr"""
    level = getattr(logging, settings.log_level, logging.INFO)

    # force=True: uvicorn installs its own root handlers before the app is built
    logging.basicConfig(level=level, handlers=[_build_handler(settings)], force=True)

    for name, library_level in _LIBRARY_LEVELS:
        logging.getLogger(name).setLevel(max(level, library_level))

    # uvicorn.error carries its own handler; let it flow to ours instead
    uvicorn_error = logging.getLogger("uvicorn.error")
    uvicorn_error.handlers.clear()
    uvicorn_error.propagate = True

    logging.getLogger(__name__).info(
        f"Logging: {settings.log_level} | Env: {settings.environment}"
    )
