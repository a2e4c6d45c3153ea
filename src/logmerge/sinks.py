from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Protocol, TextIO

from .types import HasDate

logger = logging.getLogger(__name__)


class Sink(Protocol):
    """Consumer of the merged stream.

    `emit` is called once per record in final order; `complete` exactly once
    after the last `emit`. Either may return an awaitable when driven by the
    async engine.
    """

    def emit(self, record: Any) -> None | Awaitable[None]: ...

    def complete(self) -> None | Awaitable[None]: ...


@dataclass(slots=True)
class MergeStats:
    """Running temporal statistics over an emitted stream."""

    count: int = 0
    first_date: Any = None
    last_date: Any = None
    out_of_order: int = 0
    duplicates: int = 0

    def add(self, record: HasDate) -> None:
        t = record.date
        self.count += 1
        if self.first_date is None:
            self.first_date = t
        if self.last_date is not None:
            if t < self.last_date:
                self.out_of_order += 1
            elif t == self.last_date:
                self.duplicates += 1
        self.last_date = t


@dataclass(slots=True)
class CollectSink:
    """Keep every emitted record in memory."""

    records: list[Any] = field(default_factory=list)
    stats: MergeStats = field(default_factory=MergeStats)
    completed: int = 0

    def emit(self, record: HasDate) -> None:
        self.records.append(record)
        self.stats.add(record)

    def complete(self) -> None:
        self.completed += 1

    def dates(self) -> list[Any]:
        return [r.date for r in self.records]


class PrintSink:
    """Write one line per record, then a throughput summary on completion."""

    def __init__(self, stream: TextIO | None = None, *, clock: Callable[[], float] = time.perf_counter) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.stats = MergeStats()
        self._clock = clock
        self._started: float | None = None

    def emit(self, record: HasDate) -> None:
        if self._started is None:
            self._started = self._clock()
        self.stats.add(record)
        msg = getattr(record, "msg", None)
        line = f"{record.date} {msg}" if msg is not None else str(record.date)
        print(line, file=self.stream)

    def elapsed_s(self) -> float:
        if self._started is None:
            return 0.0
        return self._clock() - self._started

    def complete(self) -> None:
        elapsed = self.elapsed_s()
        rate = (self.stats.count / elapsed) if elapsed > 0 else 0.0
        out = self.stream
        print("", file=out)
        print("*" * 35, file=out)
        print(f"Records printed:\t{self.stats.count}", file=out)
        print(f"Time taken (s):\t\t{elapsed:.3f}", file=out)
        print(f"Records/s:\t\t{rate:.1f}", file=out)
        print("*" * 35, file=out)
        if self.stats.out_of_order:
            logger.warning("%d records printed out of order", self.stats.out_of_order)
