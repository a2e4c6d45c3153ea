import pytest

from logmerge.errors import EmptyQueue, InvalidFrontier
from logmerge.frontier import Candidate, FrontierQueue, build_frontier
from logmerge.types import LogEntry


def _e(t: int) -> LogEntry:
    return LogEntry(date=t, msg=f"m{t}")


def test_extract_min_orders_by_date():
    q = FrontierQueue()
    for i, t in enumerate([5, 1, 3]):
        q.insert(Candidate(_e(t), i))

    assert len(q) == 3
    assert q.peek_min().date == 1
    assert [q.extract_min().date for _ in range(3)] == [1, 3, 5]
    assert len(q) == 0


def test_ties_go_to_lowest_source_index():
    q = FrontierQueue.from_candidates([Candidate(_e(7), 2), Candidate(_e(7), 0), Candidate(_e(7), 1)])
    assert [q.extract_min().source_index for _ in range(3)] == [0, 1, 2]


def test_ties_never_compare_records():
    class Opaque:
        def __init__(self, date):
            self.date = date

    q = FrontierQueue()
    q.insert(Candidate(Opaque(1), 1))
    q.insert(Candidate(Opaque(1), 0))
    assert q.extract_min().source_index == 0


def test_peek_does_not_remove():
    q = FrontierQueue.from_candidates([Candidate(_e(2), 0)])
    assert q.peek_min() is q.peek_min()
    assert len(q) == 1


def test_empty_queue_raises():
    q = FrontierQueue()
    assert not q
    with pytest.raises(EmptyQueue):
        q.peek_min()
    with pytest.raises(EmptyQueue):
        q.extract_min()
    # EmptyQueue is also an IndexError, like popping an empty list.
    with pytest.raises(IndexError):
        q.extract_min()


def test_build_frontier_skips_empty_sources():
    q = build_frontier([_e(5), None, _e(1)])
    assert len(q) == 2
    assert q.source_indices() == {0, 2}
    assert q.extract_min().source_index == 2


def test_build_frontier_all_empty():
    assert len(build_frontier([None, None])) == 0
    assert len(build_frontier([])) == 0


def test_build_frontier_rejects_record_without_date():
    with pytest.raises(InvalidFrontier, match=r"\[1\]"):
        build_frontier([_e(1), object()])
