"""One market's crawl cycle: load checkpoint, fetch new records, merge, persist."""

from dataclasses import dataclass

from funding_crawler.data.fetcher import PaginationDriver
from funding_crawler.data.merge import merge_records
from funding_crawler.data.store import CheckpointStore
from funding_crawler.exceptions import AdapterContractError
from funding_crawler.exchange.client import ExchangeAdapter
from funding_crawler.logging import get_logger, market_context
from funding_crawler.models import Exchange, Market
from funding_crawler.supervisor import RetrySupervisor

logger = get_logger(__name__)


@dataclass
class CrawlResult:
    """Outcome of one market's crawl."""

    exchange: Exchange
    pair: str
    fetched: int  # records returned by the exchange from the resume point on
    added: int  # records new to the persisted history
    total: int  # records persisted after the merge
    attempts: int


class MarketCrawler:
    """Runs the supervised crawl-and-merge cycle for a single market.

    Args:
        store: Checkpoint store holding every market's history.
        driver: Pagination driver.
        supervisor: Retry supervisor wrapping each cycle.
        adapters: Adapter per exchange, selected once per market.
    """

    def __init__(
        self,
        store: CheckpointStore,
        driver: PaginationDriver,
        supervisor: RetrySupervisor,
        adapters: dict[Exchange, ExchangeAdapter],
    ) -> None:
        self._store = store
        self._driver = driver
        self._supervisor = supervisor
        self._adapters = adapters

    async def crawl_market(self, market: Market) -> CrawlResult:
        """Crawl one market to completion, retrying per the supervisor policy."""
        adapter = self._adapters.get(market.exchange)
        if adapter is None:
            raise AdapterContractError(f"no adapter for exchange {market.exchange.value}")

        # Each market runs in its own task, so the bound context stays local to it
        with market_context(market):
            logger.debug("crawl_started", raw_pair=market.id)

            (fetched, added, total), attempts = await self._supervisor.run(
                market, lambda: self._crawl_once(adapter, market)
            )

            logger.info(
                "crawl_complete",
                fetched=fetched,
                added=added,
                total=total,
                attempts=attempts,
            )

        return CrawlResult(
            exchange=market.exchange,
            pair=market.pair,
            fetched=fetched,
            added=added,
            total=total,
            attempts=attempts,
        )

    async def _crawl_once(
        self, adapter: ExchangeAdapter, market: Market
    ) -> tuple[int, int, int]:
        history = self._store.load(market.exchange, market.pair)
        start_ms = self._store.resume_time(market.exchange, history)

        fresh = await self._driver.crawl(adapter, market, start_ms)

        merged = merge_records(history, fresh)
        self._store.save(market.exchange, market.pair, merged)
        return len(fresh), len(merged) - len(history), len(merged)
