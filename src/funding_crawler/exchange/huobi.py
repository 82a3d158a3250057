"""Huobi coin-margined swap funding history adapter.

GET /swap-api/v1/swap_historical_funding_rate pages by index (newest first,
50 per page) and ignores time. Pages are walked until one comes back short
after dropping entries at or before the last known settlement; those
entries can reappear on later pages when new settlements shift the pages.
"""

from dataclasses import dataclass

from funding_crawler.exceptions import FetchError, MalformedResponseError
from funding_crawler.exchange.client import ExchangeAdapter, Page, expect_list
from funding_crawler.models import Exchange, Market

PAGE_SIZE = 50


@dataclass(frozen=True)
class HuobiCursor:
    """Page index plus the newest settlement already known for the market."""

    page_index: int
    last_funding_time: int


class HuobiAdapter(ExchangeAdapter):
    """Page-index pagination over Huobi's historical funding endpoint."""

    exchange = Exchange.HUOBI

    def initial_cursor(self, start_ms: int) -> HuobiCursor:
        return HuobiCursor(page_index=1, last_funding_time=start_ms - 1)

    async def fetch_page(self, market: Market, cursor: HuobiCursor) -> Page:
        self._check_market(market)

        body = await self._get_json(
            "/swap-api/v1/swap_historical_funding_rate",
            params={
                "contract_code": market.id,
                "page_index": cursor.page_index,
                "page_size": PAGE_SIZE,
            },
        )
        source = f"Huobi swap_historical_funding_rate {market.id} page {cursor.page_index}"
        if not isinstance(body, dict):
            raise MalformedResponseError(f"{source}: expected a JSON object")
        if body.get("status") != "ok":
            raise FetchError(
                f"{source}: status={body.get('status')!r} "
                f"err_code={body.get('err_code')!r} err_msg={body.get('err_msg')!r}"
            )

        try:
            entries = expect_list(body["data"]["data"], source)
            records = [
                self._make_record(market, entry["realized_rate"], int(entry["funding_time"]))
                for entry in entries
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponseError(f"{source}: bad payload ({e!r})") from e

        records = [r for r in records if r.funding_time > cursor.last_funding_time]

        if len(records) < PAGE_SIZE:
            return Page(records=records)
        return Page(
            records=records,
            next_cursor=HuobiCursor(
                page_index=cursor.page_index + 1,
                last_funding_time=cursor.last_funding_time,
            ),
        )
