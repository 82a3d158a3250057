"""Per-market retry supervisor.

Wraps one market's crawl cycle: Fetching -> Done on success, or
Failure -> Delay -> Fetching again. Under the default policy there is no
attempt limit, so a market whose source keeps failing stays in this loop
while the other markets' tasks run to completion.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from funding_crawler.config import RetrySettings
from funding_crawler.exceptions import AdapterContractError
from funding_crawler.logging import get_logger
from funding_crawler.models import Market

logger = get_logger(__name__)

T = TypeVar("T")


class RetrySupervisor:
    """Retries a market's crawl job with a fixed delay.

    Args:
        settings: delay_seconds between attempts, max_attempts (None = forever).
        sleep: Awaitable sleep, replaceable in tests.
    """

    def __init__(
        self,
        settings: RetrySettings,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._settings = settings
        self._sleep = sleep

    async def run(self, market: Market, job: Callable[[], Awaitable[T]]) -> tuple[T, int]:
        """Run job until it succeeds.

        Returns:
            Tuple of (job result, number of attempts made).

        Raises:
            AdapterContractError: Immediately, without retrying.
            Exception: The last error once max_attempts is exhausted.
        """
        delay = self._settings.delay_seconds
        max_attempts = self._settings.max_attempts
        attempt = 0

        while True:
            attempt += 1
            try:
                return await job(), attempt
            except AdapterContractError:
                raise
            except Exception as e:
                if max_attempts is not None and attempt >= max_attempts:
                    logger.error(
                        "crawl_failed_permanently",
                        exchange=market.exchange.value,
                        pair=market.pair,
                        attempts=attempt,
                        error=str(e),
                    )
                    raise

                logger.warning(
                    "crawl_attempt_failed",
                    exchange=market.exchange.value,
                    pair=market.pair,
                    attempt=attempt,
                    delay=delay,
                    error_type=type(e).__name__,
                    error=str(e),
                )

            await self._sleep(delay)
