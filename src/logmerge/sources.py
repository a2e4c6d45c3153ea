from __future__ import annotations

import asyncio
import inspect
from typing import AsyncIterable, AsyncIterator, Generic, Iterable, Iterator, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class Source(Protocol[T_co]):
    """Blocking record provider.

    `pull()` returns the next record, or `None` once the source is drained.
    Successive records must be non-decreasing by `date`.
    """

    def pull(self) -> T_co | None: ...


class AsyncSource(Protocol[T_co]):
    """Suspending record provider, same contract as `Source`."""

    async def pull(self) -> T_co | None: ...


class IterableSource(Generic[T]):
    """Pull records from any iterable (list, generator, parquet reader...)."""

    __slots__ = ("_it", "_drained")

    def __init__(self, records: Iterable[T]) -> None:
        self._it: Iterator[T] = iter(records)
        self._drained = False

    def pull(self) -> T | None:
        if self._drained:
            return None
        rec = next(self._it, None)
        if rec is None:
            self._drained = True
        return rec


class AsyncIterableSource(Generic[T]):
    __slots__ = ("_it", "_drained")

    def __init__(self, records: AsyncIterable[T]) -> None:
        self._it: AsyncIterator[T] = aiter(records)
        self._drained = False

    async def pull(self) -> T | None:
        if self._drained:
            return None
        rec = await anext(self._it, None)
        if rec is None:
            self._drained = True
        return rec


class ThreadedSource(Generic[T]):
    """Run a blocking source's `pull()` in a worker thread.

    Lets file- or network-backed blocking sources be drained by the async
    engine without stalling the event loop.
    """

    __slots__ = ("_source",)

    def __init__(self, source: Source[T] | Iterable[T]) -> None:
        self._source = as_source(source)

    async def pull(self) -> T | None:
        return await asyncio.to_thread(self._source.pull)


def as_source(obj: Source[T] | Iterable[T]) -> Source[T]:
    if isinstance(obj, Source):
        return obj
    return IterableSource(obj)


def as_async_source(obj: AsyncSource[T] | AsyncIterable[T] | Iterable[T]) -> AsyncSource[T]:
    """Adapt `obj` to the suspending pull protocol.

    Objects whose `pull` is a coroutine function are used as-is. Blocking
    sources, async iterables and plain iterables are wrapped.
    """

    pull = getattr(obj, "pull", None)
    if pull is not None:
        if inspect.iscoroutinefunction(pull):
            return obj  # type: ignore[return-value]
        return _PullAdapter(obj)  # type: ignore[arg-type]
    if isinstance(obj, AsyncIterable):
        return AsyncIterableSource(obj)
    return _PullAdapter(IterableSource(obj))  # type: ignore[arg-type]


class _PullAdapter(Generic[T]):
    """Expose a non-coroutine `pull` to the async engine.

    The wrapped pull may return a record directly or an awaitable of one.
    """

    __slots__ = ("_source",)

    def __init__(self, source: Source[T]) -> None:
        self._source = source

    async def pull(self) -> T | None:
        rec = self._source.pull()
        if inspect.isawaitable(rec):
            rec = await rec
        return rec
