"""Funding history persistence and crawl pipeline.

Provides the file-backed checkpoint store, the merge-dedup-sort step and
the pagination driver that turns an exchange adapter into a full crawl.
"""

from funding_crawler.data.fetcher import PaginationDriver
from funding_crawler.data.merge import merge_records
from funding_crawler.data.store import CheckpointStore

__all__ = [
    "CheckpointStore",
    "PaginationDriver",
    "merge_records",
]
