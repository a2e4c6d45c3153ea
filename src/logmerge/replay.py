from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from itertools import chain
from typing import Any, Iterable, Iterator, Sequence, TypeVar

from .errors import InvalidFrontier, OutOfOrderRecord
from .frontier import Candidate, build_frontier, has_date
from .sources import Source, as_source
from .types import HasDate

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=HasDate)


class OrderCheck:
    """Tracks the last date seen per source and rejects regressions."""

    __slots__ = ("_last",)

    def __init__(self) -> None:
        self._last: dict[int, Any] = {}

    def observe(self, source_index: int, record: HasDate) -> None:
        prev = self._last.get(source_index)
        if prev is not None and record.date < prev:
            raise OutOfOrderRecord(source_index, prev, record.date)
        self._last[source_index] = record.date


def next_candidate(source_index: int, record: T | None) -> Candidate | None:
    """Turn a post-bootstrap pull result into a candidate (None = exhausted)."""

    if record is None:
        logger.debug("source %d exhausted", source_index)
        return None
    if not has_date(record):
        raise InvalidFrontier(f"source {source_index} yielded a record without a date: {record!r}")
    return Candidate(record, source_index)


def iter_merged(sources: Sequence[Source[T] | Iterable[T]], *, check_order: bool = False) -> Iterator[T]:
    """Merge time-ordered sources into one stream ordered by `date`.

    Keeps exactly one record buffered per active source (k-way merge). The
    next record of a source is pulled only after its previous record has been
    yielded, so a consumer that stops early never causes extra pulls.
    Equal dates are yielded lowest source index first.
    """

    pullers = [as_source(s) for s in sources]
    guard = OrderCheck() if check_order else None

    first = [p.pull() for p in pullers]
    queue = build_frontier(first)
    logger.debug("frontier bootstrapped: %d of %d sources active", len(queue), len(pullers))
    if guard is not None:
        for i, rec in enumerate(first):
            if rec is not None:
                guard.observe(i, rec)

    while queue:
        cand = queue.extract_min()
        yield cand.record

        idx = cand.source_index
        nxt = next_candidate(idx, pullers[idx].pull())
        if nxt is not None:
            if guard is not None:
                guard.observe(idx, nxt.record)
            queue.insert(nxt)


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MS = timedelta(milliseconds=1)


def align_bound(bound: Any, like: Any) -> Any:
    """Express a window bound as the same kind of value as the date `like`.

    Datetime bounds without tzinfo are taken as UTC. Integer dates and
    integer bounds are epoch milliseconds. Anything else is returned as-is.
    """

    if isinstance(bound, int) and not isinstance(bound, bool) and isinstance(like, datetime):
        bound = _EPOCH + bound * _MS

    if not isinstance(bound, datetime):
        return bound

    aware = bound if bound.tzinfo is not None else bound.replace(tzinfo=timezone.utc)
    if isinstance(like, datetime):
        if like.tzinfo is None:
            return aware.astimezone(timezone.utc).replace(tzinfo=None)
        return aware
    if isinstance(like, int) and not isinstance(like, bool):
        return (aware - _EPOCH) // _MS
    return bound


def slice_records(
    records: Iterable[T],
    *,
    start: Any | None = None,
    end: Any | None = None,
) -> Iterator[T]:
    """Keep records with `start <= date < end` from a date-ordered stream.

    Bounds are aligned to the first record's date (see `align_bound`), so one
    window works for timezone-aware, naive and epoch-ms date columns alike.
    Iteration stops at the first record at or after `end`.
    """

    if start is None and end is None:
        yield from records
        return

    it = iter(records)
    first = next(it, None)
    if first is None:
        return

    lo = None if start is None else align_bound(start, first.date)
    hi = None if end is None else align_bound(end, first.date)

    for rec in chain((first,), it):
        t = rec.date
        if lo is not None and t < lo:
            continue
        if hi is not None and t >= hi:
            break
        yield rec
