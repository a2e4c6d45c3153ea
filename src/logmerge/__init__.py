"""logmerge: merge independently time-sorted record sources into one ordered stream.

The core is a k-way merge over a frontier priority queue, available as a
blocking engine (`merge`, `iter_merged`) and a suspending one (`merge_async`,
`aiter_merged`). Readers for concrete storage live under `logmerge.data`.
"""

from .aio import aiter_merged, merge_async
from .engine import MergeConfig, merge
from .errors import EmptyQueue, InvalidFrontier, MergeError, OutOfOrderRecord
from .frontier import Candidate, FrontierQueue
from .replay import iter_merged, slice_records
from .sinks import CollectSink, MergeStats, PrintSink, Sink
from .sources import AsyncIterableSource, AsyncSource, IterableSource, Source, ThreadedSource
from .types import LogEntry

__all__ = [
    "merge",
    "merge_async",
    "iter_merged",
    "aiter_merged",
    "slice_records",
    "MergeConfig",
    "LogEntry",
    "Candidate",
    "FrontierQueue",
    "Source",
    "AsyncSource",
    "IterableSource",
    "AsyncIterableSource",
    "ThreadedSource",
    "Sink",
    "CollectSink",
    "PrintSink",
    "MergeStats",
    "MergeError",
    "InvalidFrontier",
    "EmptyQueue",
    "OutOfOrderRecord",
]
