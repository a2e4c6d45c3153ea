from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from .replay import iter_merged
from .sinks import Sink
from .sources import Source
from .types import HasDate

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MergeConfig:
    # Verify each source is individually non-decreasing (raises OutOfOrderRecord).
    check_order: bool = False
    # Log a progress line every N emitted records (0 disables).
    progress_every: int = 0

    def __post_init__(self) -> None:
        if self.progress_every < 0:
            raise ValueError("progress_every must be >= 0")


class Progress:
    __slots__ = ("every", "count")

    def __init__(self, every: int) -> None:
        self.every = int(every or 0)
        self.count = 0

    def tick(self, record: HasDate) -> None:
        self.count += 1
        if self.every > 0 and self.count % self.every == 0:
            logger.info("merged %d records (last date %s)", self.count, record.date)

    def done(self, mode: str) -> None:
        logger.info("%s merge complete: %d records", mode, self.count)


def merge(
    sources: Sequence[Source[HasDate] | Iterable[HasDate]],
    sink: Sink,
    *,
    config: MergeConfig | None = None,
) -> None:
    """Merge `sources` into `sink` in non-decreasing `date` order (blocking pulls).

    `sink.complete()` is called once, after the last record. Any exception
    raised by a source or the sink aborts the merge without calling it.
    """

    cfg = config or MergeConfig()
    progress = Progress(cfg.progress_every)

    merged = iter_merged(sources, check_order=cfg.check_order)
    try:
        for rec in merged:
            sink.emit(rec)
            progress.tick(rec)
    finally:
        merged.close()

    progress.done("sync")
    sink.complete()
