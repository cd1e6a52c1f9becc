"""Tests for logging setup."""

import logging

from rich.logging import RichHandler

from stats_server.core.config import Settings
from stats_server.core.logging import setup_logging


class TestSetupLogging:
    def test_installs_single_rich_handler(self):
        setup_logging(Settings(_env_file=None, log_level="debug"))

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], RichHandler)

    def test_library_loggers_stay_quiet(self):
        setup_logging(Settings(_env_file=None, log_level="DEBUG"))

        assert logging.getLogger("uvicorn.access").level == logging.WARNING
        assert logging.getLogger("asyncpg").level == logging.WARNING
        assert logging.getLogger("uvicorn.error").propagate is True
