"""Merge freshly crawled funding records into persisted history."""

from itertools import chain

from funding_crawler.models import FundingRecord


def merge_records(
    history: list[FundingRecord],
    fresh: list[FundingRecord],
) -> list[FundingRecord]:
    """Combine history and fresh records into one canonical sequence.

    Duplicates by funding_time keep the first occurrence, so a persisted
    record always wins over a re-fetched one. The result is sorted ascending
    by funding_time, and merging the same batch twice changes nothing.
    """
    unique: dict[int, FundingRecord] = {}
    for record in chain(history, fresh):
        unique.setdefault(record.funding_time, record)
    return sorted(unique.values(), key=lambda r: r.funding_time)
