"""Swap-market discovery via ccxt async.

Stands in for the external market-metadata provider: loads each exchange's
markets with ccxt and keeps the active perpetual swaps that the matching
funding endpoint can serve.
"""

from collections.abc import Callable
from typing import Any

import ccxt.async_support as ccxt_async

from funding_crawler.exceptions import MarketDiscoveryError
from funding_crawler.logging import get_logger
from funding_crawler.models import SWAP, Exchange, Market

logger = get_logger(__name__)

CCXT_IDS: dict[Exchange, str] = {
    Exchange.BINANCE: "binanceusdm",
    Exchange.BITMEX: "bitmex",
    Exchange.HUOBI: "htx",
    Exchange.OKEX: "okx",
}

# Contract kind served by each funding endpoint; None accepts any swap.
# Huobi's swap-api and BitMEX's '<base>:perpetual' only cover coin-margined swaps.
SETTLEMENT: dict[Exchange, str | None] = {
    Exchange.BINANCE: "linear",
    Exchange.BITMEX: "inverse",
    Exchange.HUOBI: "inverse",
    Exchange.OKEX: None,
}


def _create_ccxt_exchange(ccxt_id: str) -> Any:
    return getattr(ccxt_async, ccxt_id)({"enableRateLimit": True})


class MarketProvider:
    """Lists swap markets per exchange.

    Args:
        exchange_factory: Builds a ccxt async exchange from its ccxt id.
            Tests inject a fake here.
    """

    def __init__(self, exchange_factory: Callable[[str], Any] | None = None) -> None:
        self._exchange_factory = exchange_factory or _create_ccxt_exchange

    async def fetch_swap_markets(self, exchange: Exchange) -> list[Market]:
        """Return the swap markets of one exchange, one per normalized pair.

        Raises:
            MarketDiscoveryError: The exchange's markets could not be loaded.
        """
        client = self._exchange_factory(CCXT_IDS[exchange])
        try:
            raw_markets = await client.load_markets()
        except ccxt_async.BaseError as e:
            raise MarketDiscoveryError(
                f"failed to load {exchange.value} markets: {e}"
            ) from e
        finally:
            # CRITICAL for ccxt async: unclosed clients leak their aiohttp session
            await client.close()

        markets = select_swap_markets(exchange, raw_markets)
        logger.info("swap_markets_loaded", exchange=exchange.value, count=len(markets))
        return markets


def select_swap_markets(exchange: Exchange, raw_markets: dict) -> list[Market]:
    """Filter ccxt markets down to crawlable swaps, normalized to Market.

    Markets that normalize to an already seen pair are dropped so that no two
    crawl tasks write the same file.
    """
    settlement = SETTLEMENT[exchange]
    by_pair: dict[str, Market] = {}

    for symbol, market in raw_markets.items():
        if not market.get("swap") or market.get("active") is False:
            continue
        if settlement is not None and not market.get(settlement):
            continue

        pair = f"{market['base']}/{market['quote']}"
        if pair in by_pair:
            logger.warning(
                "duplicate_swap_pair_skipped",
                exchange=exchange.value,
                pair=pair,
                kept=by_pair[pair].id,
                skipped=market["id"],
            )
            continue

        by_pair[pair] = Market(
            id=market["id"],
            pair=pair,
            base_id=market["baseId"],
            exchange=exchange,
            type=SWAP,
        )

    return list(by_pair.values())
