"""OKEx perpetual swap funding adapter.

OKEx has no paginated history: historical_funding_rate returns a bounded
window of recent settlements and funding_time returns the rate of the
current, not yet settled, period. Each crawl fetches both once. The current
rate is stored as the newest record, which is why the checkpoint store
resumes OKEx from the second-to-last record.
"""

from funding_crawler.exceptions import AdapterContractError, MalformedResponseError
from funding_crawler.exchange.client import ExchangeAdapter, Page, expect_list
from funding_crawler.models import Exchange, FundingRecord, Market, parse_iso_ms

HISTORY = "history"
CURRENT = "current"


class OKExAdapter(ExchangeAdapter):
    """Two fixed calls: recent history, then the current rate."""

    exchange = Exchange.OKEX

    def initial_cursor(self, start_ms: int) -> str:
        return HISTORY

    async def fetch_page(self, market: Market, cursor: str) -> Page:
        self._check_market(market)

        if cursor == HISTORY:
            return Page(records=await self._fetch_history(market), next_cursor=CURRENT)
        if cursor == CURRENT:
            return Page(records=[await self._fetch_current(market)])
        raise AdapterContractError(f"unknown OKEx cursor {cursor!r}")

    async def _fetch_history(self, market: Market) -> list[FundingRecord]:
        source = f"OKEx historical_funding_rate {market.id}"
        body = await self._get_json(
            f"/api/swap/v3/instruments/{market.id}/historical_funding_rate"
        )
        entries = expect_list(body, source)
        try:
            return [
                self._make_record(market, entry["funding_rate"], parse_iso_ms(entry["funding_time"]))
                for entry in entries
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponseError(f"{source}: bad entry ({e!r})") from e

    async def _fetch_current(self, market: Market) -> FundingRecord:
        source = f"OKEx funding_time {market.id}"
        body = await self._get_json(f"/api/swap/v3/instruments/{market.id}/funding_time")
        if not isinstance(body, dict):
            raise MalformedResponseError(f"{source}: expected a JSON object")
        try:
            return self._make_record(market, body["funding_rate"], parse_iso_ms(body["funding_time"]))
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponseError(f"{source}: bad payload ({e!r})") from e
