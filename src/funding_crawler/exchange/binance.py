"""Binance USDⓈ-M futures funding history adapter.

GET /fapi/v1/fundingRate returns at most 1000 entries ascending from
startTime. A full page means there may be more: the next page starts one
second after the last returned settlement.
"""

from funding_crawler.exceptions import MalformedResponseError
from funding_crawler.exchange.client import ExchangeAdapter, Page, expect_list
from funding_crawler.models import Exchange, Market

PAGE_LIMIT = 1000
CURSOR_STEP_MS = 1000  # 1 second


class BinanceAdapter(ExchangeAdapter):
    """Time-cursor pagination over Binance's fundingRate endpoint."""

    exchange = Exchange.BINANCE

    def initial_cursor(self, start_ms: int) -> int:
        return start_ms

    async def fetch_page(self, market: Market, cursor: int) -> Page:
        self._check_market(market)

        body = await self._get_json(
            "/fapi/v1/fundingRate",
            params={"symbol": market.id, "startTime": cursor, "limit": PAGE_LIMIT},
        )
        entries = expect_list(body, f"Binance fundingRate {market.id}")

        try:
            records = [
                self._make_record(market, entry["fundingRate"], int(entry["fundingTime"]))
                for entry in entries
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponseError(
                f"Binance fundingRate {market.id}: bad entry ({e!r})"
            ) from e

        if len(records) < PAGE_LIMIT:
            return Page(records=records)
        return Page(records=records, next_cursor=records[-1].funding_time + CURSOR_STEP_MS)
