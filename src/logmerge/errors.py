from __future__ import annotations


class MergeError(Exception):
    """Base class for merge failures."""


class InvalidFrontier(MergeError):
    """The frontier queue does not hold one candidate per active source."""


class EmptyQueue(MergeError, IndexError):
    """Raised when reading the minimum of an empty frontier queue."""


class OutOfOrderRecord(MergeError):
    def __init__(self, source_index: int, previous: object, current: object) -> None:
        super().__init__(
            f"source {source_index} yielded date {current!r} after {previous!r}"
        )
        self.source_index = source_index
        self.previous = previous
        self.current = current
