"""Pagination driver: walks an exchange adapter until its history is exhausted.

Pages are fetched strictly one after another, since each cursor is derived
from the previous page. Exchanges that ignore the requested start time are
handled by filtering the accumulated records to funding_time >= start_ms.
"""

from funding_crawler.exceptions import FetchError
from funding_crawler.exchange.client import ExchangeAdapter
from funding_crawler.logging import get_logger
from funding_crawler.models import FundingRecord, Market

logger = get_logger(__name__)


class PaginationDriver:
    """Drives ExchangeAdapter.fetch_page() from the initial cursor to exhaustion.

    Args:
        max_pages: Upper bound on pages per crawl. A source that never
            signals exhaustion fails the crawl instead of looping forever.
    """

    def __init__(self, max_pages: int = 10_000) -> None:
        self._max_pages = max_pages

    async def crawl(
        self,
        adapter: ExchangeAdapter,
        market: Market,
        start_ms: int,
    ) -> list[FundingRecord]:
        """Fetch every record of market from start_ms on, ascending by funding_time."""
        records: list[FundingRecord] = []
        cursor = adapter.initial_cursor(start_ms)
        pages = 0

        while cursor is not None:
            if pages >= self._max_pages:
                raise FetchError(
                    f"{market.exchange.value} {market.id}: no end of history "
                    f"after {pages} pages"
                )

            page = await adapter.fetch_page(market, cursor)
            pages += 1
            records.extend(page.records)

            logger.debug(
                "funding_page_fetched",
                page=pages,
                page_records=len(page.records),
            )
            cursor = page.next_cursor

        result = sorted(
            (r for r in records if r.funding_time >= start_ms),
            key=lambda r: r.funding_time,
        )

        logger.info(
            "funding_fetch_progress",
            pages=pages,
            records_fetched=len(result),
        )
        return result
