"""Shared test fixtures for the funding rate crawler."""

import json
from collections.abc import Callable
from typing import Any

import pytest

from funding_crawler.config import AppSettings, CrawlerSettings, RetrySettings
from funding_crawler.models import Exchange, FundingRecord, Market, to_iso_string


# ---------------------------------------------------------------------------
# aiohttp stand-ins
# ---------------------------------------------------------------------------


class FakeResponse:
    """Minimal aiohttp response: async context manager with status and text()."""

    def __init__(self, status: int, body: Any) -> None:
        self.status = status
        self._body = body

    async def text(self) -> str:
        if isinstance(self._body, str):
            return self._body
        return json.dumps(self._body)

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc_info: Any) -> bool:
        return False


class FakeSession:
    """Serves queued responses in order and records every GET."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict]] = []
        self._responses: list[FakeResponse] = []

    def queue(self, body: Any, status: int = 200) -> None:
        self._responses.append(FakeResponse(status, body))

    def get(self, url: str, params: dict | None = None) -> FakeResponse:
        self.calls.append((url, dict(params or {})))
        if not self._responses:
            raise AssertionError(f"unexpected request to {url}")
        return self._responses.pop(0)


@pytest.fixture
def fake_session() -> FakeSession:
    """An aiohttp session stand-in with an empty response queue."""
    return FakeSession()


# ---------------------------------------------------------------------------
# Domain fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_settings(tmp_path) -> AppSettings:
    """Return AppSettings writing into a temp dir, with no retry delay."""
    return AppSettings(
        log_level="DEBUG",
        crawler=CrawlerSettings(data_dir=str(tmp_path / "data")),
        retry=RetrySettings(delay_seconds=0.0),
    )


@pytest.fixture
def markets() -> dict[Exchange, Market]:
    """One representative swap market per exchange."""
    return {
        Exchange.BINANCE: Market(
            id="BTCUSDT", pair="BTC/USDT", base_id="BTC", exchange=Exchange.BINANCE
        ),
        Exchange.BITMEX: Market(
            id="XBTUSD", pair="BTC/USD", base_id="XBT", exchange=Exchange.BITMEX
        ),
        Exchange.HUOBI: Market(
            id="BTC-USD", pair="BTC/USD", base_id="BTC", exchange=Exchange.HUOBI
        ),
        Exchange.OKEX: Market(
            id="BTC-USDT-SWAP", pair="BTC/USDT", base_id="BTC", exchange=Exchange.OKEX
        ),
    }


@pytest.fixture
def make_record() -> Callable[..., FundingRecord]:
    """Factory for FundingRecord with sensible defaults."""

    def _make(
        funding_time: int,
        funding_rate: float = 0.0001,
        exchange: Exchange = Exchange.BINANCE,
        pair: str = "BTC/USDT",
        raw_pair: str = "BTCUSDT",
    ) -> FundingRecord:
        return FundingRecord(
            exchange=exchange,
            pair=pair,
            raw_pair=raw_pair,
            funding_rate=funding_rate,
            funding_time=funding_time,
            funding_time_str=to_iso_string(funding_time),
        )

    return _make
