"""Record readers for on-disk and object-store log files."""

from .parquet import iter_log_entries, open_parquet, parquet_source

__all__ = ["iter_log_entries", "open_parquet", "parquet_source"]
