from __future__ import annotations

import asyncio
import inspect
import logging
from typing import AsyncIterable, AsyncIterator, Iterable, Sequence, TypeVar

from .engine import MergeConfig, Progress
from .frontier import build_frontier
from .replay import OrderCheck, next_candidate
from .sinks import Sink
from .sources import AsyncSource, as_async_source
from .types import HasDate

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=HasDate)

AnySource = AsyncSource[T] | AsyncIterable[T] | Iterable[T]


async def aiter_merged(sources: Sequence[AnySource[T]], *, check_order: bool = False) -> AsyncIterator[T]:
    """Async k-way merge over sources whose pulls may suspend.

    Bootstrap pulls are issued to every source at once and the queue is only
    built after all of them resolved. From then on exactly one pull is in
    flight: the one for the source whose record was just yielded. Output order
    depends only on record dates, never on which pull resolves first.
    """

    pullers = [as_async_source(s) for s in sources]
    guard = OrderCheck() if check_order else None

    first = await asyncio.gather(*(p.pull() for p in pullers))
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
        nxt = next_candidate(idx, await pullers[idx].pull())
        if nxt is not None:
            if guard is not None:
                guard.observe(idx, nxt.record)
            queue.insert(nxt)


async def _call(result: object) -> None:
    if inspect.isawaitable(result):
        await result


async def merge_async(
    sources: Sequence[AnySource[HasDate]],
    sink: Sink,
    *,
    config: MergeConfig | None = None,
) -> None:
    """Async counterpart of `logmerge.engine.merge`.

    Same emission contract: records reach `sink.emit` in non-decreasing
    `date` order and `sink.complete()` runs once, after the queue drained.
    A failed pull or emit propagates and `complete()` is never called.
    """

    cfg = config or MergeConfig()
    progress = Progress(cfg.progress_every)

    merged = aiter_merged(sources, check_order=cfg.check_order)
    try:
        async for rec in merged:
            await _call(sink.emit(rec))
            progress.tick(rec)
    finally:
        await merged.aclose()

    progress.done("async")
    await _call(sink.complete())
