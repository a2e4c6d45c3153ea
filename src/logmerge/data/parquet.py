from __future__ import annotations

from pathlib import Path
from typing import Iterator, Literal

import numpy as np
import pyarrow as pa
import pyarrow.compute as pc
import pyarrow.fs as fs
import pyarrow.parquet as pq

from ..sources import IterableSource
from ..types import LogEntry

SortMode = Literal["auto", "always", "never"]


def iter_log_entries(
    parquet_path: str | Path,
    *,
    date_column: str = "date",
    msg_column: str | None = "msg",
    filesystem: fs.FileSystem | None = None,
    sort_mode: SortMode = "auto",
) -> Iterator[LogEntry]:
    """Iterate `LogEntry` records from a parquet file in ascending `date` order.

    `date_column` may be a timestamp column (yields `datetime`) or an integer
    epoch column (yields `int`). Rows with a null date are dropped.

    With `sort_mode="auto"` only the first row group is sampled: when it is
    not monotonic the whole table is read and sorted. Files that are unsorted
    only past their first row group need `sort_mode="always"`.
    """

    if sort_mode not in ("auto", "always", "never"):
        raise ValueError(f"unknown sort_mode: {sort_mode!r}")

    pf = open_parquet(parquet_path, filesystem=filesystem)

    cols = [date_column] if msg_column is None else [date_column, msg_column]

    needs_sort = sort_mode == "always"
    if sort_mode == "auto" and pf.num_row_groups > 0:
        sample = pf.read_row_group(0, columns=[date_column])
        sample = sample.filter(pc.is_valid(sample[date_column]))
        arr = sample[date_column].to_numpy(zero_copy_only=False)
        if len(arr) > 1 and not bool(np.all(arr[1:] >= arr[:-1])):
            needs_sort = True

    if needs_sort:
        table = pf.read(columns=cols)
        table = table.take(pc.sort_indices(table[date_column]))
        yield from _entries(table, date_column=date_column, msg_column=msg_column)
        return

    for rg in range(pf.num_row_groups):
        table = pf.read_row_group(rg, columns=cols)
        yield from _entries(table, date_column=date_column, msg_column=msg_column)


def _entries(table: pa.Table, *, date_column: str, msg_column: str | None) -> Iterator[LogEntry]:
    table = table.filter(pc.is_valid(table[date_column]))

    dates = table[date_column].to_pylist()
    if msg_column is None:
        for d in dates:
            yield LogEntry(date=d)
        return

    msgs = pc.cast(table[msg_column], pa.string()).to_pylist()
    for d, m in zip(dates, msgs):
        yield LogEntry(date=d, msg=m or "")


def parquet_source(parquet_path: str | Path, **kwargs) -> IterableSource[LogEntry]:
    """Blocking source over one parquet log file (see `iter_log_entries`)."""

    return IterableSource(iter_log_entries(parquet_path, **kwargs))


def open_parquet(path_or_uri: str | Path, *, filesystem: fs.FileSystem | None = None) -> pq.ParquetFile:
    """Open a parquet log file from a local path or a URI (s3://, file://...).

    A URI's scheme selects the filesystem unless `filesystem` is given, in
    which case only the path part of the URI is used.
    """

    path = str(path_or_uri)
    if "://" in path:
        uri_fs, path = fs.FileSystem.from_uri(path)
        if filesystem is None:
            filesystem = uri_fs
    return pq.ParquetFile(path, filesystem=filesystem)
