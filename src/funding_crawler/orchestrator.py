"""Fan-out orchestrator -- one supervised crawl task per swap market.

Each run:
  1. DISCOVER: Load the swap-market list of every configured exchange
  2. FAN OUT: Start one independent task per market (retry-supervised)
  3. JOIN: Wait for every task; a task that aborts is logged and does not
     affect the others
  4. LOG: Run summary

Markets share no mutable state: every task reads and writes only its own
history file, so no locking is needed.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

from funding_crawler.logging import get_logger

if TYPE_CHECKING:
    from funding_crawler.config import CrawlerSettings
    from funding_crawler.crawler import CrawlResult, MarketCrawler
    from funding_crawler.exchange.markets import MarketProvider
    from funding_crawler.models import Market

logger = get_logger(__name__)


class Orchestrator:
    """Crawls every swap market of every configured exchange concurrently.

    Args:
        settings: Crawler settings (which exchanges to crawl).
        market_provider: Swap-market discovery.
        crawler: Per-market crawl cycle.
    """

    def __init__(
        self,
        settings: CrawlerSettings,
        market_provider: MarketProvider,
        crawler: MarketCrawler,
    ) -> None:
        self._settings = settings
        self._market_provider = market_provider
        self._crawler = crawler

    async def run(self) -> list[CrawlResult]:
        """Run one full crawl and return the results of completed markets.

        Raises:
            MarketDiscoveryError: A market list could not be loaded. Nothing
                is crawled in that case.
        """
        start_time = time.monotonic()

        markets = await self._discover_markets()
        logger.info(
            "crawl_run_started",
            exchanges=[e.value for e in self._settings.exchanges],
            markets=len(markets),
        )

        tasks = [
            asyncio.create_task(
                self._crawler.crawl_market(market),
                name=f"crawl:{market.exchange.value}:{market.pair}",
            )
            for market in markets
        ]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        results: list[CrawlResult] = []
        aborted = 0
        for market, outcome in zip(markets, outcomes):
            if isinstance(outcome, BaseException):
                aborted += 1
                logger.error(
                    "market_crawl_aborted",
                    exchange=market.exchange.value,
                    pair=market.pair,
                    error_type=type(outcome).__name__,
                    error=str(outcome),
                )
            else:
                results.append(outcome)

        duration = time.monotonic() - start_time
        logger.info(
            "crawl_run_complete",
            markets=len(markets),
            succeeded=len(results),
            aborted=aborted,
            records_added=sum(r.added for r in results),
            total_duration_seconds=round(duration, 1),
        )
        return results

    async def _discover_markets(self) -> list[Market]:
        market_lists = await asyncio.gather(
            *(
                self._market_provider.fetch_swap_markets(exchange)
                for exchange in self._settings.exchanges
            )
        )
        return [market for markets in market_lists for market in markets]
