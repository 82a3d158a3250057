"""Tests for structlog setup and per-market context binding."""

import logging

import pytest
import structlog

from funding_crawler.config import AppSettings
from funding_crawler.logging import QUIET_LOGGERS, market_context, setup_logging
from funding_crawler.models import Exchange


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_sets_root_level_and_single_handler(self) -> None:
        setup_logging("debug", "json")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1

    def test_unknown_level_falls_back_to_info(self) -> None:
        setup_logging("chatty")
        assert logging.getLogger().level == logging.INFO

    def test_quiets_library_loggers(self) -> None:
        setup_logging("DEBUG")
        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_format_comes_from_settings(self, monkeypatch) -> None:
        monkeypatch.setenv("LOG_FORMAT", "json")
        assert AppSettings().log_format == "json"


class TestMarketContext:
    """Tests for market_context()."""

    def test_binds_exchange_and_pair_inside_block_only(self, markets) -> None:
        with market_context(markets[Exchange.BITMEX]):
            assert structlog.contextvars.get_contextvars() == {
                "exchange": "BitMEX",
                "pair": "BTC/USD",
            }
        assert "exchange" not in structlog.contextvars.get_contextvars()
