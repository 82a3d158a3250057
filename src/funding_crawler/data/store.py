"""File-backed checkpoint store for funding history.

One JSON file per (exchange, pair) is both the published artifact and the
resume checkpoint: the newest persisted settlement decides where the next
crawl starts.

Layout: <data_dir>/<exchange>/<BASE>_<QUOTE>.json, a pretty-printed JSON
array of records ascending by fundingTime, UTF-8, newline-terminated.
"""

import json
import os
from pathlib import Path

from funding_crawler.logging import get_logger
from funding_crawler.models import DEFAULT_START_MS, Exchange, FundingRecord

logger = get_logger(__name__)


class CheckpointStore:
    """Reads and atomically rewrites per-market funding history files.

    Usage:
        store = CheckpointStore("data")
        history = store.load(Exchange.BINANCE, "BTC/USDT")
        start_ms = store.resume_time(Exchange.BINANCE, history)
    """

    def __init__(
        self,
        data_dir: str | Path,
        default_start_ms: int = DEFAULT_START_MS,
    ) -> None:
        self._data_dir = Path(data_dir)
        self._default_start_ms = default_start_ms

    def path_for(self, exchange: Exchange, pair: str) -> Path:
        """Return the history file of a market ('/' in the pair becomes '_')."""
        return self._data_dir / exchange.value / f"{pair.replace('/', '_')}.json"

    def load(self, exchange: Exchange, pair: str) -> list[FundingRecord]:
        """Return the persisted history, or [] if missing or unreadable.

        An unreadable file is moved aside to '<name>.corrupt' (numbered if
        that exists) and treated as empty history, so the market is
        re-crawled from the default start while the next save cannot
        overwrite the old content.

        Raises:
            OSError: An unreadable file could not be moved aside.
        """
        path = self.path_for(exchange, pair)
        if not path.exists():
            return []

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(data, list):
                raise TypeError(f"expected a JSON array, got {type(data).__name__}")
            return [FundingRecord.from_dict(item) for item in data]
        except (OSError, ValueError, KeyError, TypeError) as e:
            quarantine_path = self._quarantine(path)
            logger.warning(
                "checkpoint_unreadable",
                exchange=exchange.value,
                pair=pair,
                path=str(path),
                moved_to=str(quarantine_path),
                error=str(e),
            )
            return []

    @staticmethod
    def _quarantine(path: Path) -> Path:
        target = path.with_name(f"{path.name}.corrupt")
        n = 1
        while target.exists():
            target = path.with_name(f"{path.name}.corrupt.{n}")
            n += 1
        os.replace(path, target)
        return target

    def resume_time(self, exchange: Exchange, history: list[FundingRecord]) -> int:
        """Return the epoch ms the next crawl of this market starts from.

        One millisecond after the newest persisted settlement. The newest
        OKEx record comes from the current-rate endpoint and may still be
        revised, so OKEx resumes after the second-to-last record.
        """
        offset = 2 if exchange == Exchange.OKEX else 1
        if len(history) < offset:
            return self._default_start_ms
        return history[-offset].funding_time + 1

    def save(self, exchange: Exchange, pair: str, records: list[FundingRecord]) -> Path:
        """Atomically overwrite the history file with the given records."""
        path = self.path_for(exchange, pair)
        path.parent.mkdir(parents=True, exist_ok=True)

        content = json.dumps(
            [r.to_dict() for r in records], indent=2, ensure_ascii=False, allow_nan=False
        )
        tmp_path = path.with_name(f".{path.name}.tmp")
        try:
            tmp_path.write_text(f"{content}\n", encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise

        logger.debug(
            "checkpoint_saved",
            exchange=exchange.value,
            pair=pair,
            records=len(records),
        )
        return path
