"""Shared data models for the funding rate crawler.

A FundingRecord is the unit of persisted history. Records are immutable; a
market's history only ever grows by merging newly crawled records into it.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

# '2019-09-10T08:00:00.000Z', the first settlement covered by all four exchanges
DEFAULT_START_MS = 1568102400000

SWAP = "Swap"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class Exchange(str, Enum):
    """Exchanges with perpetual swap markets that are crawled."""

    BINANCE = "Binance"
    BITMEX = "BitMEX"
    HUOBI = "Huobi"
    OKEX = "OKEx"


@dataclass(frozen=True)
class Market:
    """A swap market as described by the market-metadata provider."""

    id: str
    pair: str
    base_id: str
    exchange: Exchange
    type: str = SWAP


@dataclass(frozen=True)
class FundingRecord:
    """A single settled (or, for OKEx, current) funding rate.

    funding_time is authoritative; funding_time_str is its canonical
    ISO-8601 rendering, kept in the files for readability.
    """

    exchange: Exchange
    pair: str
    raw_pair: str
    funding_rate: float
    funding_time: int
    funding_time_str: str

    def to_dict(self) -> dict:
        """Serialize with the camelCase keys used in the data files."""
        return {
            "exchange": self.exchange.value,
            "pair": self.pair,
            "rawPair": self.raw_pair,
            "fundingRate": self.funding_rate,
            "fundingTime": self.funding_time,
            "fundingTimeStr": self.funding_time_str,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FundingRecord":
        """Inverse of to_dict(). Raises KeyError/ValueError/TypeError on bad input.

        An integral float fundingTime (1568102400000.0) is accepted, since
        other JSON writers may emit one for the same value.
        """
        funding_rate = float(data["fundingRate"])
        if not math.isfinite(funding_rate):
            raise ValueError(f"fundingRate must be finite, got {funding_rate!r}")
        funding_time = data["fundingTime"]
        if isinstance(funding_time, float) and funding_time.is_integer():
            funding_time = int(funding_time)
        if not isinstance(funding_time, int) or isinstance(funding_time, bool):
            raise TypeError(f"fundingTime must be an integer, got {funding_time!r}")
        return cls(
            exchange=Exchange(data["exchange"]),
            pair=str(data["pair"]),
            raw_pair=str(data["rawPair"]),
            funding_rate=funding_rate,
            funding_time=funding_time,
            funding_time_str=str(data["fundingTimeStr"]),
        )


def to_iso_string(timestamp_ms: int) -> str:
    """Render epoch milliseconds as 'YYYY-MM-DDTHH:MM:SS.mmmZ' (UTC)."""
    dt = _EPOCH + timedelta(milliseconds=timestamp_ms)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def parse_iso_ms(text: str) -> int:
    """Parse an ISO-8601 timestamp into epoch milliseconds.

    Naive timestamps are taken as UTC. A trailing 'Z' is accepted.
    """
    if not isinstance(text, str):
        raise TypeError(f"expected an ISO-8601 string, got {text!r}")
    value = text.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (dt - _EPOCH) // timedelta(milliseconds=1)
