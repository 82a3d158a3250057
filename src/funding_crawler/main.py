"""Entry point for the funding rate crawler.

Runs one full crawl of every configured exchange and exits. Scheduling is
left to an external invoker (cron, CI schedule, ...).

Component wiring order (in build_orchestrator):
1. CheckpointStore (per-market history files)
2. Exchange adapters (sharing one aiohttp session)
3. PaginationDriver
4. RetrySupervisor
5. MarketCrawler
6. MarketProvider (ccxt market discovery)
7. Orchestrator

Exit code is 0 once every market task has finished, 1 on a startup
failure such as an unreachable market-metadata source.
"""

import asyncio
import sys

import aiohttp

from funding_crawler.config import AppSettings
from funding_crawler.crawler import CrawlResult, MarketCrawler
from funding_crawler.data.fetcher import PaginationDriver
from funding_crawler.data.store import CheckpointStore
from funding_crawler.exchange import build_adapters
from funding_crawler.exchange.markets import MarketProvider
from funding_crawler.logging import get_logger, setup_logging
from funding_crawler.orchestrator import Orchestrator
from funding_crawler.supervisor import RetrySupervisor


def build_orchestrator(
    settings: AppSettings,
    session: aiohttp.ClientSession,
    market_provider: MarketProvider | None = None,
) -> Orchestrator:
    """Build the component graph for one run.

    Args:
        settings: Application-wide settings.
        session: aiohttp session shared by all exchange adapters.
        market_provider: Swap-market discovery; the ccxt-backed provider
            when omitted.
    """
    store = CheckpointStore(
        settings.crawler.data_dir,
        default_start_ms=settings.crawler.default_start_ms,
    )
    crawler = MarketCrawler(
        store=store,
        driver=PaginationDriver(max_pages=settings.crawler.max_pages),
        supervisor=RetrySupervisor(settings.retry),
        adapters=build_adapters(session, settings.endpoints),
    )
    return Orchestrator(
        settings=settings.crawler,
        market_provider=market_provider or MarketProvider(),
        crawler=crawler,
    )


async def run() -> list[CrawlResult]:
    """Load settings, set up logging, and run one full crawl."""
    settings = AppSettings()
    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("funding_crawler.main")

    logger.info(
        "funding_crawler_starting",
        data_dir=settings.crawler.data_dir,
        exchanges=[e.value for e in settings.crawler.exchanges],
        retry_delay_seconds=settings.retry.delay_seconds,
        max_attempts=settings.retry.max_attempts,
    )

    async with aiohttp.ClientSession() as session:
        orchestrator = build_orchestrator(settings, session)
        return await orchestrator.run()


def main() -> None:
    """Synchronous entry point."""
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception:
        get_logger("funding_crawler.main").critical("crawler_startup_failed", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
