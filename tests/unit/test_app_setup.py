"""Engine options and logging setup."""

from __future__ import annotations

import logging

import structlog

from eduquest.config import Settings
from eduquest.database import _engine_options
from eduquest.middleware.logging import setup_logging
from eduquest.redis_client import make_key


class TestEngineOptions:
    """Pool sizing only applies to server databases."""

    def test_postgres_gets_pool_sizing(self):
        options = _engine_options(Settings(database_url="postgresql+asyncpg://u:p@db:5432/eduquest", db_pool_size=7))
        assert options["pool_size"] == 7
        assert options["max_overflow"] == 10
        assert options["pool_pre_ping"] is True

    def test_sqlite_has_no_pool_sizing(self):
        options = _engine_options(Settings(database_url="sqlite+aiosqlite:///eduquest.db"))
        assert "pool_size" not in options
        assert "max_overflow" not in options


class TestLoggingSetup:
    """Repeated setup (one per app instance) keeps a single handler."""

    def _ours(self) -> list[logging.Handler]:
        return [
            h for h in logging.getLogger().handlers
            if isinstance(h.formatter, structlog.stdlib.ProcessorFormatter)
        ]

    def test_setup_is_idempotent(self):
        settings = Settings(log_format="console", log_level="debug")
        setup_logging(settings)
        setup_logging(settings)
        assert len(self._ours()) == 1
        assert logging.getLogger().level == logging.DEBUG


def test_redis_key_namespace():
    assert make_key("ratelimit", "10.0.0.1", 42) == "eduquest:ratelimit:10.0.0.1:42"
