"""BitMEX perpetual funding history adapter.

GET /api/v1/funding is queried by '<baseId>:perpetual' (e.g. 'XBT:perpetual')
and returns at most 500 entries ascending from startTime. Settlements are
hours apart, so the next page starts one hour after the last entry.
"""

from funding_crawler.exceptions import MalformedResponseError
from funding_crawler.exchange.client import ExchangeAdapter, Page, expect_list
from funding_crawler.models import Exchange, Market, parse_iso_ms, to_iso_string

PAGE_LIMIT = 500
CURSOR_STEP_MS = 3_600_000  # 1 hour


class BitMEXAdapter(ExchangeAdapter):
    """Time-cursor pagination over BitMEX's funding endpoint."""

    exchange = Exchange.BITMEX

    def initial_cursor(self, start_ms: int) -> int:
        return start_ms

    async def fetch_page(self, market: Market, cursor: int) -> Page:
        self._check_market(market)

        body = await self._get_json(
            "/api/v1/funding",
            params={
                "symbol": f"{market.base_id}:perpetual",
                "count": PAGE_LIMIT,
                "startTime": to_iso_string(cursor),
            },
        )
        entries = expect_list(body, f"BitMEX funding {market.base_id}")

        try:
            records = [
                self._make_record(market, entry["fundingRate"], parse_iso_ms(entry["timestamp"]))
                for entry in entries
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponseError(
                f"BitMEX funding {market.base_id}: bad entry ({e!r})"
            ) from e

        if len(records) < PAGE_LIMIT:
            return Page(records=records)
        return Page(records=records, next_cursor=records[-1].funding_time + CURSOR_STEP_MS)
