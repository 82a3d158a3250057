"""Exchange layer -- funding history adapters and swap-market discovery."""

import aiohttp

from funding_crawler.config import EndpointSettings
from funding_crawler.exchange.binance import BinanceAdapter
from funding_crawler.exchange.bitmex import BitMEXAdapter
from funding_crawler.exchange.client import ExchangeAdapter, Page
from funding_crawler.exchange.huobi import HuobiAdapter
from funding_crawler.exchange.markets import MarketProvider
from funding_crawler.exchange.okex import OKExAdapter
from funding_crawler.models import Exchange


def build_adapters(
    session: aiohttp.ClientSession, endpoints: EndpointSettings
) -> dict[Exchange, ExchangeAdapter]:
    """Create one adapter per exchange, all sharing the given session."""
    return {
        Exchange.BINANCE: BinanceAdapter(session, endpoints.binance_url),
        Exchange.BITMEX: BitMEXAdapter(session, endpoints.bitmex_url),
        Exchange.HUOBI: HuobiAdapter(session, endpoints.huobi_url),
        Exchange.OKEX: OKExAdapter(session, endpoints.okex_url),
    }


__all__ = [
    "BinanceAdapter",
    "BitMEXAdapter",
    "ExchangeAdapter",
    "HuobiAdapter",
    "MarketProvider",
    "OKExAdapter",
    "Page",
    "build_adapters",
]
