"""Custom exceptions for the funding rate crawler.

The retry supervisor decides what to do with a failed crawl purely from the
exception type, so every fetch-side failure is mapped onto one of these.
"""


class CrawlerError(Exception):
    """Base exception for all crawler errors."""


class FetchError(CrawlerError):
    """Raised when an exchange request fails (non-200 status, error envelope).

    Transient: the retry supervisor logs it, waits, and retries the market.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class MalformedResponseError(FetchError):
    """Raised when a response body cannot be parsed into funding records."""


class AdapterContractError(CrawlerError):
    """Raised when an adapter is handed a market it cannot serve.

    Fatal for the offending market's task; never retried.
    """


class MarketDiscoveryError(CrawlerError):
    """Raised when the swap-market list of an exchange cannot be loaded."""
