"""Tests for BitMEXAdapter."""

import pytest

from funding_crawler.exceptions import MalformedResponseError
from funding_crawler.exchange.bitmex import BitMEXAdapter
from funding_crawler.models import DEFAULT_START_MS, Exchange, to_iso_string

BASE_URL = "https://www.bitmex.test"
EIGHT_HOURS_MS = 8 * 3_600_000


@pytest.fixture
def adapter(fake_session) -> BitMEXAdapter:
    return BitMEXAdapter(fake_session, BASE_URL)


@pytest.fixture
def market(markets):
    return markets[Exchange.BITMEX]


def _entries(count: int, start: int = DEFAULT_START_MS) -> list[dict]:
    return [
        {
            "timestamp": to_iso_string(start + i * EIGHT_HOURS_MS),
            "symbol": "XBTUSD",
            "fundingInterval": "2000-01-01T08:00:00.000Z",
            "fundingRate": 0.000375,
            "fundingRateDaily": 0.001125,
        }
        for i in range(count)
    ]


class TestBitMEXAdapter:
    """Tests for BitMEX request construction and pagination."""

    @pytest.mark.asyncio
    async def test_queries_perpetual_by_base_id(self, adapter, market, fake_session) -> None:
        fake_session.queue([])
        await adapter.fetch_page(market, adapter.initial_cursor(DEFAULT_START_MS))
        url, params = fake_session.calls[0]
        assert url == f"{BASE_URL}/api/v1/funding"
        assert params == {
            "symbol": "XBT:perpetual",
            "count": 500,
            "startTime": "2019-09-10T08:00:00.000Z",
        }

    @pytest.mark.asyncio
    async def test_parses_iso_timestamps(self, adapter, market, fake_session) -> None:
        fake_session.queue(_entries(2))
        page = await adapter.fetch_page(market, DEFAULT_START_MS)
        assert [r.funding_time for r in page.records] == [
            DEFAULT_START_MS,
            DEFAULT_START_MS + EIGHT_HOURS_MS,
        ]
        assert page.records[0].funding_rate == 0.000375
        assert page.records[0].raw_pair == "XBTUSD"
        assert page.records[0].pair == "BTC/USD"

    @pytest.mark.asyncio
    async def test_full_page_advances_one_hour(self, adapter, market, fake_session) -> None:
        fake_session.queue(_entries(500))
        page = await adapter.fetch_page(market, DEFAULT_START_MS)
        assert page.next_cursor == page.records[-1].funding_time + 3_600_000

    @pytest.mark.asyncio
    async def test_short_page_is_exhausted(self, adapter, market, fake_session) -> None:
        fake_session.queue(_entries(499))
        page = await adapter.fetch_page(market, DEFAULT_START_MS)
        assert page.next_cursor is None

    @pytest.mark.asyncio
    async def test_bad_timestamp(self, adapter, market, fake_session) -> None:
        entries = _entries(1)
        entries[0]["timestamp"] = "not-a-date"
        fake_session.queue(entries)
        with pytest.raises(MalformedResponseError):
            await adapter.fetch_page(market, DEFAULT_START_MS)

    @pytest.mark.asyncio
    async def test_null_rate(self, adapter, market, fake_session) -> None:
        entries = _entries(1)
        entries[0]["fundingRate"] = None
        fake_session.queue(entries)
        with pytest.raises(MalformedResponseError):
            await adapter.fetch_page(market, DEFAULT_START_MS)
