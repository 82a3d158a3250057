"""Tests for merge_records: dedup by funding_time, ascending order, idempotence."""

from funding_crawler.data.merge import merge_records


def _times(records) -> list[int]:
    return [r.funding_time for r in records]


class TestMergeRecords:
    """Tests for merge_records()."""

    def test_overlap_is_not_duplicated(self, make_record) -> None:
        history = [make_record(1000)]
        fresh = [make_record(1000), make_record(2000)]
        merged = merge_records(history, fresh)
        assert _times(merged) == [1000, 2000]

    def test_history_wins_on_same_time(self, make_record) -> None:
        history = [make_record(1000, funding_rate=0.0001)]
        fresh = [make_record(1000, funding_rate=0.0009)]
        merged = merge_records(history, fresh)
        assert len(merged) == 1
        assert merged[0].funding_rate == 0.0001

    def test_first_fresh_occurrence_wins_within_batch(self, make_record) -> None:
        fresh = [make_record(3000, funding_rate=0.1), make_record(3000, funding_rate=0.2)]
        assert merge_records([], fresh)[0].funding_rate == 0.1

    def test_sorted_and_unique_for_unordered_inputs(self, make_record) -> None:
        history = [make_record(t) for t in (5000, 1000, 3000)]
        fresh = [make_record(t) for t in (4000, 1000, 6000, 2000, 4000)]
        merged = merge_records(history, fresh)
        times = _times(merged)
        assert times == sorted(times)
        assert len(times) == len(set(times))
        assert times == [1000, 2000, 3000, 4000, 5000, 6000]

    def test_idempotent(self, make_record) -> None:
        history = [make_record(t) for t in (1000, 2000)]
        fresh = [make_record(t, funding_rate=-0.0003) for t in (2000, 3000, 4000)]
        once = merge_records(history, fresh)
        assert merge_records(once, fresh) == once

    def test_empty_inputs(self, make_record) -> None:
        assert merge_records([], []) == []
        assert _times(merge_records([], [make_record(1)])) == [1]
        assert _times(merge_records([make_record(1)], [])) == [1]

    def test_does_not_mutate_inputs(self, make_record) -> None:
        history = [make_record(2000)]
        fresh = [make_record(1000)]
        merge_records(history, fresh)
        assert _times(history) == [2000]
        assert _times(fresh) == [1000]
