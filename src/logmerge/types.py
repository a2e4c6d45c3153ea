from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol


class HasDate(Protocol):
    date: Any


@dataclass(frozen=True, slots=True)
class LogEntry:
    """A single timestamped log line.

    `date` only needs to be comparable with the other entries of a merge;
    sources usually hand out `datetime` values, but epoch ints work as well.
    """

    date: datetime | int
    msg: str = ""
