"""Abstract exchange adapter interface.

Defines the contract the pagination driver relies on. Each exchange exposes
its funding history through a different pagination idiom; the concrete
adapters hide that behind initial_cursor()/fetch_page() so the driver loop
never branches on the exchange.
"""

import json
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import aiohttp

from funding_crawler.exceptions import (
    AdapterContractError,
    FetchError,
    MalformedResponseError,
)
from funding_crawler.logging import get_logger
from funding_crawler.models import SWAP, Exchange, FundingRecord, Market, to_iso_string

logger = get_logger(__name__)

# Error bodies are logged, keep them short
_MAX_ERROR_BODY = 200


@dataclass
class Page:
    """One page of funding history.

    next_cursor is None when the source signals there is nothing more to
    fetch for this crawl.
    """

    records: list[FundingRecord] = field(default_factory=list)
    next_cursor: Any = None


class ExchangeAdapter(ABC):
    """Base class for per-exchange funding history adapters.

    Args:
        session: Shared aiohttp session, owned by the caller.
        base_url: REST API root, e.g. "https://fapi.binance.com".
    """

    exchange: Exchange

    def __init__(self, session: aiohttp.ClientSession, base_url: str) -> None:
        self._session = session
        self._base_url = base_url.rstrip("/")

    @abstractmethod
    def initial_cursor(self, start_ms: int) -> Any:
        """Return the cursor of the first page for a crawl starting at start_ms."""
        ...

    @abstractmethod
    async def fetch_page(self, market: Market, cursor: Any) -> Page:
        """Fetch one page of funding history at the given cursor.

        Pagination is NOT looped here -- the driver keeps calling with
        page.next_cursor until it is None.
        """
        ...

    # ──────────────────────────────────────────────
    # Helpers shared by the concrete adapters
    # ──────────────────────────────────────────────

    def _check_market(self, market: Market) -> None:
        """Reject markets this adapter cannot serve."""
        if market.type != SWAP:
            raise AdapterContractError(
                f"{self.exchange.value} adapter only serves {SWAP} markets, "
                f"got {market.type!r} for {market.id}"
            )
        if market.exchange != self.exchange:
            raise AdapterContractError(
                f"{self.exchange.value} adapter handed a "
                f"{market.exchange.value} market ({market.id})"
            )

    async def _get_json(self, path: str, params: dict | None = None) -> Any:
        """GET base_url + path and decode the JSON body.

        Raises:
            FetchError: Non-200 status.
            MalformedResponseError: Body is not valid JSON.
        """
        url = f"{self._base_url}{path}"
        async with self._session.get(url, params=params) as resp:
            text = await resp.text()
            if resp.status != 200:
                raise FetchError(
                    f"GET {url} returned HTTP {resp.status}: {text[:_MAX_ERROR_BODY]}",
                    status=resp.status,
                )
        try:
            return json.loads(text)
        except ValueError as e:
            raise MalformedResponseError(
                f"GET {url} returned a non-JSON body: {text[:_MAX_ERROR_BODY]}"
            ) from e

    def _make_record(
        self,
        market: Market,
        raw_rate: Any,
        funding_time: int,
    ) -> FundingRecord:
        """Normalize one exchange entry into a FundingRecord.

        Raises:
            MalformedResponseError: Rate is missing, unparsable, NaN or infinite.
        """
        try:
            funding_rate = float(raw_rate)
        except (TypeError, ValueError) as e:
            raise MalformedResponseError(
                f"unparsable funding rate {raw_rate!r} for {market.id}"
            ) from e
        if not math.isfinite(funding_rate):
            raise MalformedResponseError(
                f"non-finite funding rate {raw_rate!r} for {market.id}"
            )
        return FundingRecord(
            exchange=self.exchange,
            pair=market.pair,
            raw_pair=market.id,
            funding_rate=funding_rate,
            funding_time=funding_time,
            funding_time_str=to_iso_string(funding_time),
        )


def expect_list(body: Any, source: str) -> list:
    """Return body if it is a JSON array, else raise MalformedResponseError."""
    if not isinstance(body, list):
        raise MalformedResponseError(
            f"{source}: expected a JSON array, got {type(body).__name__}"
        )
    return body
