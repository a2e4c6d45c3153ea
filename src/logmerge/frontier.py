from __future__ import annotations

import heapq
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from .errors import EmptyQueue, InvalidFrontier


@dataclass(frozen=True, slots=True)
class Candidate:
    """Next not-yet-emitted record of one source."""

    record: Any
    source_index: int

    @property
    def date(self) -> Any:
        return self.record.date


class FrontierQueue:
    """Min-heap of candidates keyed by `(date, source_index)`.

    Ties on `date` are broken by the lowest source index. Since a queue holds
    at most one candidate per source, the key is unique and records themselves
    are never compared.
    """

    __slots__ = ("_heap",)

    def __init__(self) -> None:
        self._heap: list[tuple[Any, int, Candidate]] = []

    @classmethod
    def from_candidates(cls, candidates: Iterable[Candidate]) -> "FrontierQueue":
        q = cls()
        q._heap = [(c.date, c.source_index, c) for c in candidates]
        heapq.heapify(q._heap)
        return q

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def insert(self, candidate: Candidate) -> None:
        heapq.heappush(self._heap, (candidate.date, candidate.source_index, candidate))

    def peek_min(self) -> Candidate:
        if not self._heap:
            raise EmptyQueue("peek_min on empty frontier queue")
        return self._heap[0][2]

    def extract_min(self) -> Candidate:
        if not self._heap:
            raise EmptyQueue("extract_min on empty frontier queue")
        return heapq.heappop(self._heap)[2]

    def source_indices(self) -> set[int]:
        return {idx for _, idx, _ in self._heap}


_MISSING = object()


def has_date(record: object) -> bool:
    return getattr(record, "date", _MISSING) is not _MISSING


def build_frontier(first_records: Sequence[Any]) -> FrontierQueue:
    """Bootstrap a frontier queue from each source's first pull.

    `first_records[i]` is what source `i` returned (`None` when it was empty
    from the start). Empty sources never enter the queue. Raises
    `InvalidFrontier` when the queue does not end up with exactly one
    candidate per source that yielded something.
    """

    yielded = sum(1 for rec in first_records if rec is not None)
    queue = FrontierQueue.from_candidates(
        Candidate(rec, i) for i, rec in enumerate(first_records) if rec is not None and has_date(rec)
    )
    if len(queue) != yielded:
        bad = [i for i, rec in enumerate(first_records) if rec is not None and not has_date(rec)]
        raise InvalidFrontier(
            f"frontier has {len(queue)} candidates for {yielded} active sources "
            f"(sources without a usable record: {bad})"
        )
    return queue
